"""Table definitions shared by the backends."""

PROGRAMS = "programs"
DAYS = "days"
EXERCISE_ASSIGNMENTS = "exercise_assignments"
EXERCISE_BANK = "exercise_bank"
BLOG_POSTS = "blog_posts"

TABLES = (PROGRAMS, DAYS, EXERCISE_ASSIGNMENTS, EXERCISE_BANK, BLOG_POSTS)

# Columns stored as JSON text in SQLite (native json/arrays on the hosted backend)
JSON_COLUMNS = {
    PROGRAMS: {"tags", "results", "summary"},
    EXERCISE_BANK: {"zones"},
}

BOOL_COLUMNS = {
    PROGRAMS: {"active"},
}

SQLITE_SCHEMA = [
    f"""
    CREATE TABLE IF NOT EXISTS {PROGRAMS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT DEFAULT '',
        duration INTEGER NOT NULL CHECK (duration >= 1),
        type TEXT NOT NULL DEFAULT 'discovery',
        clan_id TEXT,
        tags TEXT DEFAULT '[]',
        results TEXT DEFAULT '[]',
        summary TEXT DEFAULT '[]',
        image_url TEXT,
        difficulty TEXT DEFAULT 'medium',
        active INTEGER DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DAYS} (
        id TEXT PRIMARY KEY,
        program_id TEXT NOT NULL,
        ordinal INTEGER NOT NULL CHECK (ordinal >= 1),
        UNIQUE (program_id, ordinal),
        FOREIGN KEY (program_id) REFERENCES {PROGRAMS}(id) ON DELETE CASCADE
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {EXERCISE_ASSIGNMENTS} (
        id TEXT PRIMARY KEY,
        day_id TEXT NOT NULL,
        ordinal INTEGER NOT NULL,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        level INTEGER DEFAULT 1,
        target_value TEXT DEFAULT '',
        category TEXT DEFAULT '',
        description TEXT DEFAULT '',
        image_url TEXT,
        video_url TEXT,
        variant TEXT DEFAULT '',
        FOREIGN KEY (day_id) REFERENCES {DAYS}(id) ON DELETE CASCADE
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {EXERCISE_BANK} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        type TEXT NOT NULL,
        level INTEGER DEFAULT 1,
        zones TEXT DEFAULT '[]',
        category TEXT DEFAULT '',
        description TEXT DEFAULT '',
        image_url TEXT,
        video_url TEXT,
        variant TEXT DEFAULT ''
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {BLOG_POSTS} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        content TEXT NOT NULL DEFAULT '',
        image_url TEXT,
        category TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_days_program ON {DAYS}(program_id)",
    f"CREATE INDEX IF NOT EXISTS idx_assignments_day ON {EXERCISE_ASSIGNMENTS}(day_id)",
    f"CREATE INDEX IF NOT EXISTS idx_bank_name ON {EXERCISE_BANK}(name)",
]
