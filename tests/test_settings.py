from resourcehub.settings import Settings


def test_cors_origins_accepts_json_and_csv() -> None:
    assert Settings(_env_file=None, CORS_ORIGINS='["https://a.com", "http://localhost:3000"]').cors_origins == [
        "https://a.com",
        "http://localhost:3000",
    ]
    assert Settings(_env_file=None, CORS_ORIGINS="https://a.com, https://b.com").cors_origins == [
        "https://a.com",
        "https://b.com",
    ]


def test_async_database_url_rewrites_driver() -> None:
    settings = Settings(_env_file=None, database_url="postgresql://u:p@db:5432/hub")
    assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/hub"


def test_page_size_and_weights_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.page_size >= 1
    assert settings.popularity_weight_downvotes < 0
