"""
Configuration Module Unit Tests
"""

import os
import json
import tempfile
from pathlib import Path
import pytest

from surf_retreats.config import (
    SiteConfig,
    SiteEnvironment,
    ConfigLoader,
    ConfigValidator,
    ConfigDefaults,
)
from surf_retreats.exceptions import ConfigError, ValidationError


class TestConfigValidator:
    """Tests for ConfigValidator"""

    @pytest.fixture
    def validator(self) -> ConfigValidator:
        return ConfigValidator()

    @pytest.fixture
    def valid_config(self) -> dict:
        return {
            "site_url": "https://rainbowsurfretreats.com",
            "company_country": "PT",
            "default_locale": "en",
            "stripe_secret_key": "sk_test_123",
        }

    def test_validate_valid_config(self, validator: ConfigValidator, valid_config: dict):
        """Should pass with valid configuration"""
        result = validator.validate(valid_config)
        assert result.valid is True
        assert len(result.errors) == 0

    def test_validate_empty_config(self, validator: ConfigValidator):
        """Should pass with nothing set, defaults fill in later"""
        result = validator.validate({})
        assert result.valid is True

    def test_validate_invalid_environment(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with invalid environment"""
        valid_config["environment"] = "staging"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "environment" for e in result.errors)

    def test_validate_timeout_too_low(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with timeout too low"""
        valid_config["timeout"] = 100
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(
            e.field == "timeout" and "1000ms" in e.message
            for e in result.errors
        )

    def test_validate_negative_timeout(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with negative timeout"""
        valid_config["timeout"] = -1000
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "timeout" for e in result.errors)

    def test_validate_invalid_site_url(self, validator: ConfigValidator, valid_config: dict):
        """Should fail with invalid site_url"""
        valid_config["site_url"] = "rainbowsurfretreats.com"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "site_url" for e in result.errors)

    def test_validate_unsupported_locale(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when the default locale is not supported"""
        valid_config["default_locale"] = "it"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "default_locale" for e in result.errors)

    def test_validate_lowercase_company_country(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when the company country is not uppercase"""
        valid_config["company_country"] = "pt"
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "company_country" for e in result.errors)

    def test_validate_early_bird_out_of_range(self, validator: ConfigValidator, valid_config: dict):
        """Should fail when the early bird percent exceeds 100"""
        valid_config["early_bird_percent"] = 150
        result = validator.validate(valid_config)
        assert result.valid is False
        assert any(e.field == "early_bird_percent" for e in result.errors)

    def test_validate_production_requires_secrets(self, validator: ConfigValidator, valid_config: dict):
        """Should require all secrets in production"""
        valid_config["environment"] = "production"
        result = validator.validate(valid_config)
        assert result.valid is False
        fields = {e.field for e in result.errors}
        assert fields == {"stripe_webhook_secret", "feedback_token_secret"}
        assert all(e.value == "[REDACTED]" for e in result.errors)

    def test_validate_production_with_secrets(self, validator: ConfigValidator, valid_config: dict):
        """Should pass in production when every secret is set"""
        valid_config.update({
            "environment": SiteEnvironment.PRODUCTION,
            "stripe_webhook_secret": "whsec_123",
            "feedback_token_secret": "feedback-secret",
        })
        result = validator.validate(valid_config)
        assert result.valid is True

    def test_validate_or_raise_invalid(self, validator: ConfigValidator, valid_config: dict):
        """Should raise ValidationError with invalid configuration"""
        valid_config["retry_attempts"] = 50
        with pytest.raises(ValidationError) as exc_info:
            validator.validate_or_raise(valid_config)
        assert exc_info.value.field == "retry_attempts"


class TestConfigLoader:
    """Tests for ConfigLoader"""

    @pytest.fixture
    def loader(self) -> ConfigLoader:
        return ConfigLoader()

    @pytest.fixture
    def valid_config(self) -> dict:
        return {
            "site_url": "https://example.com/",
            "company_country": "PT",
            "stripe_secret_key": "sk_test_123",
        }

    def test_from_dict(self, loader: ConfigLoader, valid_config: dict):
        """Should return a copy of the configuration"""
        result = loader.from_dict(valid_config)
        assert result == valid_config
        assert result is not valid_config

    def test_from_environment(self, loader: ConfigLoader, monkeypatch):
        """Should load configuration from environment variables"""
        monkeypatch.setenv("SURF_SITE_URL", "https://staging.example.com")
        monkeypatch.setenv("SURF_ENVIRONMENT", "PRODUCTION")
        monkeypatch.setenv("SURF_COMPANY_COUNTRY", "de")
        monkeypatch.setenv("SURF_TIMEOUT", "60000")
        monkeypatch.setenv("SURF_ENABLE_AUDIT_LOG", "false")
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_live_abc")

        result = loader.from_environment()

        assert result["site_url"] == "https://staging.example.com"
        assert result["environment"] == SiteEnvironment.PRODUCTION
        assert result["company_country"] == "DE"
        assert result["timeout"] == 60000
        assert result["enable_audit_log"] is False
        assert result["stripe_secret_key"] == "sk_live_abc"

    def test_from_environment_skips_empty(self, loader: ConfigLoader, monkeypatch):
        """Should ignore variables set to an empty string"""
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "")
        result = loader.from_environment()
        assert "stripe_webhook_secret" not in result

    def test_from_environment_boolean_parsing(self, loader: ConfigLoader, monkeypatch):
        """Should parse boolean values correctly"""
        monkeypatch.setenv("SURF_ENABLE_AUDIT_LOG", "true")
        result = loader.from_environment()
        assert result["enable_audit_log"] is True

        monkeypatch.setenv("SURF_ENABLE_AUDIT_LOG", "1")
        result = loader.from_environment()
        assert result["enable_audit_log"] is True

        monkeypatch.setenv("SURF_ENABLE_AUDIT_LOG", "false")
        result = loader.from_environment()
        assert result["enable_audit_log"] is False

    def test_merge(self, loader: ConfigLoader):
        """Should merge multiple configurations with priority"""
        base = {"company_country": "PT", "currency": "eur"}
        override = {"company_country": "ES", "timeout": 5000}

        result = loader.merge(base, override)

        assert result["company_country"] == "ES"
        assert result["currency"] == "eur"
        assert result["timeout"] == 5000

    def test_merge_filters_none_and_empty(self, loader: ConfigLoader):
        """Should not include None or empty values from overrides"""
        base = {"stripe_secret_key": "sk_test_1", "timeout": 30000}
        override = {"stripe_secret_key": "", "timeout": None}

        result = loader.merge(base, override)

        assert result["stripe_secret_key"] == "sk_test_1"
        assert result["timeout"] == 30000

    def test_resolve_applies_defaults(self, loader: ConfigLoader, valid_config: dict):
        """Should apply default values"""
        result = loader.resolve(valid_config)

        assert result.environment == SiteEnvironment.DEVELOPMENT
        assert result.timeout == ConfigDefaults.TIMEOUT
        assert result.retry_attempts == ConfigDefaults.RETRY_ATTEMPTS
        assert result.early_bird_percent == ConfigDefaults.EARLY_BIRD_PERCENT
        assert result.currency == ConfigDefaults.CURRENCY
        assert result.site_url == "https://example.com"

    def test_resolve_invalid_raises(self, loader: ConfigLoader, valid_config: dict):
        """Should raise ValidationError before building the model"""
        valid_config["timeout"] = 10
        with pytest.raises(ValidationError):
            loader.resolve(valid_config)

    def test_from_file(self, loader: ConfigLoader, valid_config: dict):
        """Should load configuration from JSON file"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump(valid_config, f)
            f.flush()

            try:
                result = loader.from_file(f.name)
                assert result["company_country"] == "PT"
            finally:
                os.unlink(f.name)

    def test_from_file_not_found(self, loader: ConfigLoader):
        """Should raise error for missing file"""
        with pytest.raises(ConfigError) as exc_info:
            loader.from_file("/nonexistent/path.json")

        assert exc_info.value.code == "CONFIG_FILE_NOT_FOUND"

    def test_from_file_not_an_object(self, loader: ConfigLoader, tmp_path: Path):
        """Should reject a file holding a JSON array"""
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            loader.from_file(path)

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"

    def test_from_file_invalid_json(self, loader: ConfigLoader, tmp_path: Path):
        """Should raise a parse error for malformed JSON"""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            loader.from_file(path)

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"

    def test_load_from_config(self, loader: ConfigLoader, valid_config: dict):
        """Should load and resolve configuration from dict"""
        result = loader.load(config=valid_config, env=False)

        assert result.stripe_secret_key == "sk_test_123"
        assert result.environment == SiteEnvironment.DEVELOPMENT
        assert result.is_production is False

    def test_load_config_overrides_environment(self, loader: ConfigLoader, monkeypatch):
        """Programmatic values should win over environment variables"""
        monkeypatch.setenv("SURF_COMPANY_COUNTRY", "ES")
        result = loader.load(config={"company_country": "FR"})
        assert result.company_country == "FR"

    def test_create_template(self, loader: ConfigLoader):
        """Should create template configuration file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            template_path = Path(tmpdir) / "config" / "template.json"
            loader.create_template(template_path)

            assert template_path.exists()

            with open(template_path) as f:
                template = json.load(f)

            assert template["company_country"] == "PT"
            assert template["stripe_secret_key"] == ""
            assert "environment" in template

    def test_template_loads_back(self, loader: ConfigLoader, tmp_path: Path):
        """A fresh template should resolve to the defaults"""
        template_path = tmp_path / "template.json"
        loader.create_template(template_path)

        result = loader.load(file=template_path, env=False)

        assert result.site_url == ConfigDefaults.SITE_URL
        assert result.stripe_secret_key is None


class TestSiteConfig:
    """Tests for SiteConfig Pydantic model"""

    def test_defaults(self):
        """Should create config with defaults only"""
        config = SiteConfig()
        assert config.company_country == "PT"
        assert config.default_locale == "en"
        assert config.environment == SiteEnvironment.DEVELOPMENT

    def test_strips_trailing_slash(self):
        """Should drop the trailing slash from URLs"""
        config = SiteConfig(site_url="https://example.com/")
        assert config.site_url == "https://example.com"

    def test_currency_lowercased(self):
        """Should store the currency lowercase"""
        config = SiteConfig(currency="EUR")
        assert config.currency == "eur"

    def test_invalid_site_url(self):
        """Should reject invalid site_url"""
        with pytest.raises(ValueError):
            SiteConfig(site_url="not-a-url")

    def test_invalid_company_country(self):
        """Should reject a lowercase company country"""
        with pytest.raises(ValueError):
            SiteConfig(company_country="pt")

    def test_invalid_default_locale(self):
        """Should reject an unsupported locale"""
        with pytest.raises(ValueError):
            SiteConfig(default_locale="pt")

    def test_is_production(self):
        """Should report production environment"""
        config = SiteConfig(environment="production")
        assert config.is_production is True
