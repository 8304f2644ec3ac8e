"""Tests for the migration runner's bookkeeping."""

from unittest.mock import MagicMock

from run_migrations import (
    Migration,
    apply_migration,
    checksum_of,
    discover_migrations,
    select_pending,
)


def write(directory, name: str, content: str):
    path = directory / name
    path.write_text(content)
    return path


class TestDiscoverMigrations:
    def test_sorted_by_filename(self, tmp_path):
        write(tmp_path, "002_watchlist.sql", "CREATE TABLE b ();")
        write(tmp_path, "001_users.sql", "CREATE TABLE a ();")
        write(tmp_path, "notes.txt", "ignored")

        migrations = discover_migrations(tmp_path)

        assert [m.name for m in migrations] == ["001_users.sql", "002_watchlist.sql"]
        assert migrations[0].checksum == checksum_of("CREATE TABLE a ();")

    def test_missing_directory(self, tmp_path):
        assert discover_migrations(tmp_path / "absent") == []

    def test_bundled_migrations_exist(self):
        names = [m.name for m in discover_migrations()]

        assert "001_auth_schema.sql" in names


class TestSelectPending:
    def test_splits_pending_and_changed(self, tmp_path):
        first = Migration("001.sql", tmp_path / "001.sql", "aaa")
        second = Migration("002.sql", tmp_path / "002.sql", "bbb")
        third = Migration("003.sql", tmp_path / "003.sql", "ccc")

        pending, changed = select_pending(
            [first, second, third], {"001.sql": "aaa", "002.sql": "old"}
        )

        assert pending == [third]
        assert changed == [second]

    def test_nothing_applied(self, tmp_path):
        migration = Migration("001.sql", tmp_path / "001.sql", "aaa")

        pending, changed = select_pending([migration], {})

        assert pending == [migration]
        assert changed == []


class TestApplyMigration:
    def test_runs_and_records_in_one_commit(self, tmp_path):
        path = write(tmp_path, "001_users.sql", "CREATE TABLE a ();")
        conn = MagicMock()
        cursor = conn.cursor.return_value.__enter__.return_value

        apply_migration(conn, Migration(path.name, path, checksum_of(path.read_text())))

        assert cursor.execute.call_count == 2
        assert cursor.execute.call_args_list[0][0][0] == "CREATE TABLE a ();"
        conn.commit.assert_called_once()
