"""Integration tests for the usage tracer."""

import os
import tempfile
import unittest

from extraction.definitions import extract_definitions
from extraction.models import Usage, UsagePurpose
from usage.patterns import build_purpose_rules
from usage.tracer import build_name_patterns, build_usage_context, dedup_usages, trace_usages

JAVA = "src/main/java/com/example"


def _write(root: str, relative: str, content: str) -> str:
    path = os.path.join(root, *relative.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def _usage(type_name: str, method: str) -> Usage:
    return Usage(type_name, method, 1, "A.java", "Used in A", UsagePurpose.OTHER, method)


class TestHelpers(unittest.TestCase):
    def test_usage_context(self):
        self.assertEqual(
            build_usage_context("com.x.DataSourceConfig", ["Bean"]),
            "Bean configuration: Configuration in DataSourceConfig",
        )
        self.assertEqual(build_usage_context("com.x.OrderService", []), "Business logic in OrderService")
        self.assertEqual(
            build_usage_context("com.x.StatusController", ["PostConstruct"]),
            "Initialization: HTTP endpoint in StatusController",
        )
        self.assertEqual(build_usage_context("com.x.UserRepository", []), "Data access in UserRepository")
        self.assertEqual(
            build_usage_context("com.x.DbHealthIndicator", ["Scheduled"]),
            "Scheduled task: Health check in DbHealthIndicator",
        )
        self.assertEqual(build_usage_context("Plain", []), "Used in Plain")

    def test_name_patterns(self):
        placeholder, quoted = build_name_patterns(["API_KEY", "db.url"])
        self.assertEqual(placeholder.search("x ${API_KEY:abc} y").group(1), "API_KEY")
        self.assertEqual(placeholder.search("${db.url}").group(1), "db.url")
        self.assertIsNone(placeholder.search("${dbXurl}"))
        self.assertEqual(quoted.search('get("API_KEY")').group(1), "API_KEY")
        self.assertIsNone(quoted.search('get("API_KEY_2")'))
        self.assertEqual(build_name_patterns([]), (None, None))

    def test_dedup_keeps_first_per_method(self):
        first = _usage("A", "one")
        usages = dedup_usages([first, _usage("A", "two"), _usage("A", "one"), _usage("B", "one")])
        self.assertEqual([(u.containing_type_name, u.method_name) for u in usages], [("A", "one"), ("A", "two"), ("B", "one")])
        self.assertIs(usages[0], first)


class TestTraceUsages(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name
        self.rules = build_purpose_rules()

    def tearDown(self):
        self._tmp.cleanup()

    def trace(self):
        catalog = extract_definitions(self.root)
        return trace_usages(self.root, catalog, self.rules)

    def test_field_following(self):
        _write(
            self.root,
            f"{JAVA}/Repo.java",
            "package com.example;\n"
            "public class Repo {\n"
            "    @Value(\"${DB_URL}\")\n"
            "    private String dbUrl;\n"
            "\n"
            "    public void connectToDatabase() {\n"
            "        open(dbUrl);\n"
            "    }\n"
            "\n"
            "    public void unrelated() {\n"
            "        return;\n"
            "    }\n"
            "}\n",
        )
        catalog = self.trace()

        usages = catalog["DB_URL"].usages
        self.assertEqual(len(usages), 1)
        usage = usages[0]
        self.assertEqual(usage.method_name, "connectToDatabase")
        self.assertEqual(usage.containing_type_name, "com.example.Repo")
        self.assertEqual(usage.line_number, 6)
        self.assertEqual(usage.file_path, f"{JAVA}/Repo.java")
        self.assertEqual(usage.purpose, UsagePurpose.DATABASE_CONNECTION)
        self.assertEqual(usage.context_description, "Used in Repo")
        self.assertEqual(usage.code_snippet, "public void connectToDatabase()")

    def test_direct_matching_and_dedup(self):
        _write(
            self.root,
            f"{JAVA}/TokenService.java",
            "package com.example;\n"
            "public class TokenService {\n"
            "    public String method1() {\n"
            "        return System.getenv(\"SIGNING_KEY\");\n"
            "    }\n"
            "    public String method2() {\n"
            "        String a = System.getenv(\"SIGNING_KEY\");\n"
            "        String b = System.getenv(\"SIGNING_KEY\");\n"
            "        return a + b;\n"
            "    }\n"
            "}\n",
        )
        catalog = self.trace()

        usages = catalog["SIGNING_KEY"].usages
        self.assertEqual([u.method_name for u in usages], ["method1", "method2"])
        self.assertEqual(usages[0].context_description, "Business logic in TokenService")

    def test_field_and_direct_match_in_same_method_collapse(self):
        _write(
            self.root,
            f"{JAVA}/CacheConfig.java",
            "package com.example;\n"
            "public class CacheConfig {\n"
            "    @Value(\"${REDIS_HOST}\")\n"
            "    private String redisHost;\n"
            "\n"
            "    @Bean\n"
            "    public Object redis() {\n"
            "        log(\"${REDIS_HOST}\", redisHost);\n"
            "        return null;\n"
            "    }\n"
            "}\n",
        )
        catalog = self.trace()

        usages = catalog["REDIS_HOST"].usages
        self.assertEqual(len(usages), 1)
        self.assertEqual(usages[0].purpose, UsagePurpose.CACHE_CONFIG)
        self.assertEqual(usages[0].context_description, "Bean configuration: Configuration in CacheConfig")
        self.assertEqual(usages[0].code_snippet, "@Bean\npublic Object redis()")

    def test_usages_across_files_for_config_variable(self):
        _write(self.root, "src/main/resources/application.properties", "gateway.url=${GATEWAY_URL}\n")
        _write(
            self.root,
            f"{JAVA}/Client.java",
            "package com.example;\n"
            "public class Client {\n"
            "    void call(Environment environment) {\n"
            "        environment.getProperty(\"GATEWAY_URL\");\n"
            "    }\n"
            "    void other() { String s = \"GATEWAY_URL_SUFFIX\"; }\n"
            "}\n",
        )
        catalog = self.trace()

        usages = catalog["GATEWAY_URL"].usages
        self.assertEqual([u.method_name for u in usages], ["call"])
        self.assertEqual(usages[0].purpose, UsagePurpose.EXTERNAL_API)

    def test_empty_catalog_is_untouched(self):
        _write(self.root, f"{JAVA}/Nothing.java", "class Nothing { void run() {} }\n")
        catalog = self.trace()
        self.assertEqual(len(catalog), 0)

    def test_broken_files_are_skipped(self):
        _write(self.root, "src/main/resources/application.yml", "x: ${ANY}\n")
        _write(self.root, f"{JAVA}/Broken.java", "class Broken { void run( { \"ANY\" }\n")
        catalog = self.trace()
        self.assertEqual(catalog["ANY"].usages, [])


if __name__ == "__main__":
    unittest.main()
