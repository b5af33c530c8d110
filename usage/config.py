"""
Configuration constants for usage tracing.

Purpose keyword groups are listed in rule order: the first group whose
keywords appear in a usage's text decides its purpose.
"""

from typing import Tuple

# Rule order matters: caches mention hosts and ports, databases mention urls
PURPOSE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("AUTHENTICATION", ("security", "auth", "jwt", "oauth", "password", "credential", "secret")),
    ("CACHE_CONFIG", ("cache", "redis", "ehcache", "caffeine", "hazelcast")),
    ("DATABASE_CONNECTION", ("datasource", "jdbc", "hikari", "database", "db", "postgres", "mysql", "oracle", "mongo")),
    ("EXTERNAL_API", ("resttemplate", "webclient", "feign", "http", "client", "endpoint", "url", "uri")),
    ("FEATURE_FLAG", ("feature", "flag", "toggle", "enabled", "disabled")),
    ("LOGGING_CONFIG", ("log", "logging", "logger", "slf4j", "logback")),
    ("SERVER_CONFIG", ("server", "port", "host", "address", "ssl", "tls")),
    ("MESSAGING_CONFIG", ("kafka", "rabbit", "mq", "jms", "amqp", "queue", "topic", "message")),
)

# Method annotation -> context description prefix, checked in this order
CONTEXT_ANNOTATION_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("Bean", "Bean configuration: "),
    ("PostConstruct", "Initialization: "),
    ("Scheduled", "Scheduled task: "),
)

# Simple type-name fragment -> context description, checked in this order
CONTEXT_TYPE_ROLES: Tuple[Tuple[str, str], ...] = (
    ("Config", "Configuration in"),
    ("Service", "Business logic in"),
    ("Controller", "HTTP endpoint in"),
    ("Repository", "Data access in"),
    ("Health", "Health check in"),
)

DEFAULT_TYPE_ROLE: str = "Used in"

PHASE: str = "trace-usages"
