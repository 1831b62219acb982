from entity_hydrator.config import DATABASE_URL_ENV, DEFAULT_DATABASE_URL, get_database_url


def test_defaults_to_in_memory_sqlite(monkeypatch):
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)

    assert get_database_url() == DEFAULT_DATABASE_URL == "sqlite://"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv(DATABASE_URL_ENV, "postgresql://localhost/hydrator")

    assert get_database_url() == "postgresql://localhost/hydrator"
