#!/usr/bin/env python3
"""
Validate environment configuration before deployment.
Checks for required variables, settings consistency, and OpenRouter reachability.
Exit code 0 = OK, 1 = problems detected.
"""
import os
import sys
import logging
from typing import List

import httpx
from pydantic import ValidationError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class EnvironmentValidator:
    """Validates environment configuration for deployment."""

    def __init__(self, check_network: bool = True):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: List[str] = []
        self.check_network = check_network
        self.settings = None

    def validate_all(self) -> bool:
        """Run all validation checks."""
        logger.info("Starting environment validation...")

        self.validate_settings()
        self.validate_required_variables()
        self.validate_optional_variables()
        self.validate_security_settings()
        if self.check_network:
            self.validate_external_services()

        self.print_results()
        return len(self.errors) == 0

    def validate_settings(self):
        """Load the application settings and report validation failures."""
        from aeo_compare.config import Settings

        try:
            self.settings = Settings()
        except ValidationError as e:
            self.errors.append(f"Settings failed validation: {e}")
            return
        self.info.append(
            f"Environment: {self.settings.environment}, model: {self.settings.openrouter_model}"
        )

    def _configured_value(self, var: str):
        """Value as the app sees it (environment or .env), falling back to the raw environment."""
        if self.settings is not None:
            return getattr(self.settings, var.lower(), None)
        return os.getenv(var)

    def validate_required_variables(self):
        """Check all required settings."""
        required_vars = [
            ("OPENROUTER_API_KEY", "OpenRouter API key"),
        ]
        for var, description in required_vars:
            value = self._configured_value(var)
            if not value:
                self.errors.append(f"Missing required variable {var}: {description}")
            elif len(value.strip()) < 8:
                self.warnings.append(f"Variable {var} seems too short (< 8 characters)")
            elif var == "OPENROUTER_API_KEY" and not value.startswith("sk-or-"):
                self.warnings.append("OPENROUTER_API_KEY does not look like an OpenRouter key (sk-or-...)")

    def validate_optional_variables(self):
        """Check optional but recommended variables."""
        optional_vars = [
            ("OPENROUTER_REFERER", "requests will not be attributed to your site on openrouter.ai"),
            ("OPENROUTER_TITLE", "requests will not carry an app title on openrouter.ai"),
        ]
        for var, consequence in optional_vars:
            if not self._configured_value(var):
                self.warnings.append(f"Optional variable {var} not set: {consequence}")

    def validate_external_services(self):
        """Test OpenRouter connectivity (best-effort)."""
        if self.settings is None or not self.settings.has_api_key:
            return
        try:
            if self._test_openrouter():
                self.info.append("OpenRouter API connectivity verified")
            else:
                self.errors.append("OpenRouter API connectivity test failed")
        except Exception as e:
            self.errors.append(f"OpenRouter API test error: {str(e)}")

    def _test_openrouter(self) -> bool:
        resp = httpx.get(
            f"{self.settings.openrouter_base_url}/key",
            headers={"Authorization": f"Bearer {self.settings.openrouter_api_key}"},
            timeout=10,
        )
        return resp.status_code == 200

    def validate_security_settings(self):
        """Check basic security toggles."""
        if self.settings is not None:
            debug = self.settings.debug
        else:
            debug = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
        if debug:
            self.warnings.append("DEBUG is enabled; disable in production")
        if self.settings is not None and "*" in self.settings.cors_origins:
            self.warnings.append("CORS allows any origin")

    def print_results(self):
        print("\n===== Environment Validation Report =====\n")
        if self.info:
            print("Info:")
            for msg in self.info:
                print(f"  - {msg}")
            print("")
        if self.warnings:
            print("Warnings:")
            for msg in self.warnings:
                print(f"  - {msg}")
            print("")
        if self.errors:
            print("Errors:")
            for msg in self.errors:
                print(f"  - {msg}")
            print("")
        overall = "PASS" if not self.errors else "FAIL"
        print(f"Overall: {overall}")
        print("")


def main() -> int:
    check_network = "--offline" not in sys.argv[1:]
    validator = EnvironmentValidator(check_network=check_network)
    ok = validator.validate_all()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
