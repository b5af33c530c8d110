"""Tests for the shared naming helpers."""

import unittest

from core.naming import (
    camel_to_kebab,
    find_placeholders,
    normalize_property_key,
    relaxed_property_keys,
    resolve_placeholder_default,
    to_env_name,
)


class TestNameConversion(unittest.TestCase):
    def test_camel_to_kebab(self) -> None:
        self.assertEqual(camel_to_kebab("poolSize"), "pool-size")
        self.assertEqual(camel_to_kebab("url"), "url")
        self.assertEqual(camel_to_kebab("maxIdleTime"), "max-idle-time")

    def test_camel_to_kebab_keeps_acronyms_together(self) -> None:
        self.assertEqual(camel_to_kebab("baseURL"), "base-url")

    def test_to_env_name(self) -> None:
        self.assertEqual(to_env_name("app.db.pool-size"), "APP_DB_POOL_SIZE")
        self.assertEqual(to_env_name("service.url"), "SERVICE_URL")
        self.assertEqual(to_env_name("ALREADY_UPPER"), "ALREADY_UPPER")

    def test_normalize_property_key(self) -> None:
        self.assertEqual(normalize_property_key("  App.DB.Url "), "app.db.url")
        self.assertEqual(normalize_property_key(None), "")


class TestRelaxedKeys(unittest.TestCase):
    def test_order_and_dedup(self) -> None:
        keys = relaxed_property_keys("app.db.pool-size")
        self.assertEqual(keys[0], "app.db.pool-size")
        self.assertIn("app.db.pool_size", keys)
        self.assertIn("app_db_pool_size", keys)
        self.assertIn("app.db.poolsize", keys)
        self.assertEqual(len(keys), len(set(keys)))

    def test_plain_name_has_single_spelling(self) -> None:
        self.assertEqual(relaxed_property_keys("timeout"), ["timeout"])


class TestPlaceholders(unittest.TestCase):
    def test_find_placeholders(self) -> None:
        found = find_placeholders("url: ${DB_URL:jdbc:h2:mem} user: ${DB_USER}")
        self.assertEqual(
            found,
            [
                ("DB_URL", "jdbc:h2:mem", "${DB_URL:jdbc:h2:mem}"),
                ("DB_USER", None, "${DB_USER}"),
            ],
        )

    def test_empty_default_is_not_none(self) -> None:
        self.assertEqual(find_placeholders("${OPTIONAL:}"), [("OPTIONAL", "", "${OPTIONAL:}")])

    def test_names_may_contain_dots_and_dashes(self) -> None:
        names = [name for name, _, _ in find_placeholders("${app.db-url} ${a_b}")]
        self.assertEqual(names, ["app.db-url", "a_b"])

    def test_first_placeholder_default_is_whole_value(self) -> None:
        self.assertEqual(
            resolve_placeholder_default("jdbc:postgresql://${DB_HOST:localhost}:${DB_PORT:5432}/app"),
            "localhost",
        )

    def test_first_placeholder_without_default_is_none(self) -> None:
        self.assertIsNone(resolve_placeholder_default("prefix-${SECRET}-${OTHER:x}"))

    def test_empty_default_is_kept(self) -> None:
        self.assertEqual(resolve_placeholder_default("${OPTIONAL:}"), "")

    def test_plain_value_unchanged(self) -> None:
        self.assertEqual(resolve_placeholder_default("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
