from tortoise import BaseDBAsyncClient

RUN_IN_TRANSACTION = True


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "users" (
    "id" UUID NOT NULL PRIMARY KEY,
    "username" VARCHAR(50) NOT NULL UNIQUE,
    "email" VARCHAR(255) NOT NULL UNIQUE,
    "password_hash" VARCHAR(255) NOT NULL,
    "level" INT NOT NULL DEFAULT 1,
    "xp" INT NOT NULL DEFAULT 0,
    "total_xp" INT NOT NULL DEFAULT 0,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS "idx_users_email_133a6f" ON "users" ("email");
COMMENT ON TABLE "users" IS 'Player account.';
CREATE TABLE IF NOT EXISTS "habits" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "title" VARCHAR(200) NOT NULL,
    "description" TEXT,
    "frequency" VARCHAR(10) NOT NULL DEFAULT 'daily',
    "difficulty" VARCHAR(10) NOT NULL DEFAULT 'medium',
    "is_active" BOOL NOT NULL DEFAULT True,
    "current_streak" INT NOT NULL DEFAULT 0,
    "best_streak" INT NOT NULL DEFAULT 0,
    "last_completed_at" TIMESTAMPTZ,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "user_id" UUID NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_habits_is_acti_5b8f2e" ON "habits" ("is_active");
COMMENT ON COLUMN "habits"."frequency" IS 'DAILY: daily\nWEEKLY: weekly';
COMMENT ON COLUMN "habits"."difficulty" IS 'EASY: easy\nMEDIUM: medium\nHARD: hard';
COMMENT ON TABLE "habits" IS 'Habit owned by a user.';
CREATE TABLE IF NOT EXISTS "completion_logs" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "completed_at" TIMESTAMPTZ NOT NULL,
    "completed_on" DATE NOT NULL,
    "habit_id" INT NOT NULL REFERENCES "habits" ("id") ON DELETE CASCADE,
    CONSTRAINT "uid_completion__habit_i_0c4e1d" UNIQUE ("habit_id", "completed_on")
);
COMMENT ON TABLE "completion_logs" IS 'A single completion of a habit.';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "completion_logs";
        DROP TABLE IF EXISTS "habits";
        DROP TABLE IF EXISTS "users";"""
