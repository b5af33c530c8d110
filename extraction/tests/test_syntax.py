"""Tests for the JavaSource query layer."""

import unittest

from extraction.config import FIELD_NODE
from extraction.parser import parse_bytes
from extraction.syntax import JavaSource, annotation_matches

SOURCE = b'''package com.example.billing;

import org.springframework.beans.factory.annotation.Value;

@Configuration
@ConfigurationProperties(prefix = "app.db")
public class BillingConfig {

    private static final String CONSTANT = "x";

    @Value("${API_KEY}")
    private String apiKey;

    @org.springframework.beans.factory.annotation.Value(value = "${API_TIMEOUT:30}")
    private int timeout;

    private int poolSize = 10, maxIdle = 2;

    @Bean
    public Client client(String name) {
        String token = System.getenv("TOKEN");
        return new Client(apiKey, env.getProperty("service.url", "http://localhost"));
    }

    class Inner {
        void innerWork() {
            System.getProperty("inner.flag");
        }
    }
}
'''


def _source(data: bytes = SOURCE, path: str = "/repo/src/main/java/com/example/billing/BillingConfig.java") -> JavaSource:
    return JavaSource(path, "src/main/java/com/example/billing/BillingConfig.java", parse_bytes(data), data)


class TestAnnotationMatching(unittest.TestCase):
    def test_simple_and_qualified(self):
        self.assertTrue(annotation_matches("Value", "Value"))
        self.assertTrue(annotation_matches("org.springframework.beans.factory.annotation.Value", "Value"))
        self.assertFalse(annotation_matches("MyValue", "Value"))


class TestJavaSource(unittest.TestCase):
    def setUp(self):
        self.source = _source()

    def test_no_syntax_errors(self):
        self.assertFalse(self.source.has_syntax_errors)

    def test_type_name_uses_package_and_file_stem(self):
        self.assertEqual(self.source.package_name, "com.example.billing")
        self.assertEqual(self.source.type_name, "com.example.billing.BillingConfig")

    def test_type_name_without_package(self):
        source = _source(b"class Plain {}", "/repo/Plain.java")
        self.assertEqual(source.type_name, "Plain")

    def test_fields_with_annotation(self):
        fields = self.source.fields_with_annotation("Value")
        self.assertEqual(len(fields), 2)
        names = [self.source.field_declarators(f)[0][0] for f in fields]
        self.assertEqual(names, ["apiKey", "timeout"])

    def test_annotation_argument_single_member_and_pair(self):
        first, second = self.source.fields_with_annotation("Value")
        self.assertEqual(
            self.source.annotation_argument(self.source.find_annotation(first, "Value")),
            "${API_KEY}",
        )
        self.assertEqual(
            self.source.annotation_argument(self.source.find_annotation(second, "Value")),
            "${API_TIMEOUT:30}",
        )

    def test_class_annotation_prefix(self):
        classes = self.source.classes_with_annotation("ConfigurationProperties")
        self.assertEqual(len(classes), 1)
        annotation = self.source.find_annotation(classes[0], "ConfigurationProperties")
        self.assertEqual(self.source.annotation_argument(annotation, ("prefix", "value")), "app.db")

    def test_class_fields_include_static(self):
        class_node = self.source.classes_with_annotation("ConfigurationProperties")[0]
        fields = self.source.class_fields(class_node)
        self.assertEqual(len(fields), 4)
        self.assertEqual(self.source.field_declarators(fields[0])[0][0], "CONSTANT")

        declarators = self.source.field_declarators(fields[-1])
        self.assertEqual([name for name, _ in declarators], ["poolSize", "maxIdle"])
        self.assertEqual(self.source.literal_value(declarators[0][1]), "10")

    def test_method_calls_receiver_and_arguments(self):
        calls = self.source.method_calls("getProperty")
        receivers = [self.source.call_receiver(c) for c in calls]
        self.assertEqual(receivers, ["env", "System"])

        arguments = self.source.call_arguments(calls[0])
        self.assertEqual(self.source.string_literal_value(arguments[0]), "service.url")
        self.assertEqual(self.source.literal_value(arguments[1]), "http://localhost")

    def test_containing_method_is_innermost(self):
        getenv = self.source.method_calls("getenv")[0]
        method = self.source.containing_method(getenv.start_byte)
        self.assertEqual(self.source.method_name(method), "client")

        inner_call = [c for c in self.source.method_calls("getProperty") if self.source.call_receiver(c) == "System"][0]
        method = self.source.containing_method(inner_call.start_byte)
        self.assertEqual(self.source.method_name(method), "innerWork")

    def test_containing_method_outside_any_method(self):
        field = self.source.find_nodes(FIELD_NODE)[0]
        self.assertIsNone(self.source.containing_method(field.start_byte))

    def test_method_body_and_signature(self):
        method = [m for m in self.source.methods() if self.source.method_name(m) == "client"][0]
        self.assertIn("apiKey", self.source.method_body_text(method))
        self.assertEqual(self.source.method_signature(method), "@Bean\npublic Client client(String name)")
        self.assertEqual(self.source.annotation_names(method), ["Bean"])
        self.assertEqual(self.source.line(method), 19)

    def test_literal_values(self):
        source = _source(b'class A { boolean a = true; char c = \'x\'; Object o = null; }', "/repo/A.java")
        values = [
            source.literal_value(declarators[0][1])
            for declarators in (source.field_declarators(f) for f in source.find_nodes(FIELD_NODE))
        ]
        self.assertEqual(values, ["true", "x", None])


if __name__ == "__main__":
    unittest.main()
