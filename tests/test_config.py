import pytest

from tvshowup.config import SitemapConfig, database_path, load_settings


def test_base_url_trailing_slash_stripped():
    config = SitemapConfig(base_url="https://example.test///", image_base="https://img.test/t/")
    assert config.base_url == "https://example.test"
    assert config.image_base == "https://img.test/t"


@pytest.mark.parametrize("languages", [(), ("",), ("en", "en")])
def test_invalid_languages_rejected(languages):
    with pytest.raises(ValueError):
        SitemapConfig(languages=languages)


def test_non_positive_limits_rejected():
    with pytest.raises(ValueError):
        SitemapConfig(max_urls=0)


def test_records_per_sitemap():
    assert SitemapConfig(languages=("en", "tr", "de")).records_per_sitemap == 16666
    assert SitemapConfig(languages=("en", "tr"), max_urls=1).records_per_sitemap == 1


def test_defaults():
    config = SitemapConfig()
    assert config.base_url == "https://www.tvshowup.com"
    assert len(config.languages) == 11
    assert config.max_urls == 50000


def test_from_settings(monkeypatch):
    monkeypatch.delenv("SITE_BASE_URL", raising=False)
    config = SitemapConfig.from_settings({
        "site": {"base_url": "https://yaml.test/", "languages": "en, fr"},
        "sitemap": {"max_urls": 100, "people_max_pages": 2},
    })
    assert config.base_url == "https://yaml.test"
    assert config.languages == ("en", "fr")
    assert config.max_urls == 100
    assert config.people_max_pages == 2
    assert config.people_max_records == 2000


def test_from_settings_env_overrides_base_url(monkeypatch):
    monkeypatch.setenv("SITE_BASE_URL", "https://env.test")
    config = SitemapConfig.from_settings({"site": {"base_url": "https://yaml.test"}})
    assert config.base_url == "https://env.test"


def test_load_settings_reads_yaml(settings_file):
    settings = load_settings(settings_file)
    assert settings["site"]["base_url"] == "https://example.test"
    assert settings["import"]["page_delay"] == 0


def test_load_settings_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yaml")


def test_load_settings_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_settings(path)


def test_database_path(monkeypatch, tmp_path):
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    assert database_path({"database": {"path": ":memory:"}}) == ":memory:"
    assert database_path({}).endswith("tvshowup.db")

    target = str(tmp_path / "env.db")
    monkeypatch.setenv("DATABASE_PATH", target)
    assert database_path({"database": {"path": "ignored.db"}}) == target
