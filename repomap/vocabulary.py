"""Fixed vocabularies used by the heuristic analyzers.

Every keyword table lives here so the analyzers' outputs stay stable. Order
matters where noted: the first matching rule wins.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple


class FilePurpose(str, Enum):
	TESTING = "Тестирование"
	CONFIGURATION = "Конфигурация"
	TYPES = "Типы и интерфейсы"
	UTILITIES = "Утилиты"
	API = "API"
	COMPONENTS = "Компоненты"
	SERVICES = "Сервисы"
	MODELS = "Модели данных"
	CONTROLLERS = "Контроллеры"
	MIDDLEWARE = "Промежуточное ПО"
	MAIN_MODULE = "Основной модуль"
	CLASSES = "Классы"
	GENERAL = "Общий код"


class DesignPattern(str, Enum):
	SINGLETON = "Singleton"
	FACTORY = "Factory"
	OBSERVER = "Observer"
	STRATEGY = "Strategy"
	DECORATOR = "Decorator"
	ADAPTER = "Adapter"
	REPOSITORY = "Repository"
	SERVICE = "Service"
	STANDARD = "Standard Class"


GENERAL_LOGIC = "general logic"
GENERAL_DOMAIN = "General Business Logic"
GENERAL_LAYER = "General Layer"

BUSINESS_KEYWORDS: Tuple[str, ...] = (
	"validate", "check", "verify", "process", "calculate", "compute",
	"transform", "convert", "format", "parse", "serialize", "deserialize",
	"save", "load", "create", "update", "delete", "find", "search",
	"filter", "sort", "group", "aggregate", "sum", "count", "average",
	"authenticate", "authorize", "encrypt", "decrypt", "hash", "sign",
	"send", "receive", "notify", "log", "audit", "backup", "restore",
)

# Filename substrings, checked in order.
PURPOSE_BY_FILENAME: List[Tuple[Tuple[str, ...], FilePurpose]] = [
	(("test", "spec"), FilePurpose.TESTING),
	(("config",), FilePurpose.CONFIGURATION),
	(("types", "interfaces"), FilePurpose.TYPES),
	(("utils", "helpers"), FilePurpose.UTILITIES),
	(("api", "routes"), FilePurpose.API),
	(("components",), FilePurpose.COMPONENTS),
	(("services",), FilePurpose.SERVICES),
	(("models",), FilePurpose.MODELS),
	(("controllers",), FilePurpose.CONTROLLERS),
	(("middleware",), FilePurpose.MIDDLEWARE),
]

# Design patterns: any keyword in the tuple selects the pattern. Singleton
# has an extra "instance and static" rule in heuristics.detect_design_pattern.
PATTERN_KEYWORDS: List[Tuple[Tuple[str, ...], DesignPattern]] = [
	(("singleton",), DesignPattern.SINGLETON),
	(("factory", "create"), DesignPattern.FACTORY),
	(("observer", "subscribe", "emit"), DesignPattern.OBSERVER),
	(("strategy", "algorithm"), DesignPattern.STRATEGY),
	(("decorator", "@"), DesignPattern.DECORATOR),
	(("adapter", "adapt"), DesignPattern.ADAPTER),
	(("repository", "data access"), DesignPattern.REPOSITORY),
	(("service", "business logic"), DesignPattern.SERVICE),
]

DOMAIN_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
	(("user", "auth", "login"), "Authentication & Authorization"),
	(("payment", "billing", "invoice"), "Billing & Payments"),
	(("order", "cart", "purchase"), "Orders & Shopping"),
	(("product", "catalog", "inventory"), "Product Management"),
	(("notification", "email", "sms"), "Notifications"),
	(("report", "analytics", "dashboard"), "Reporting & Analytics"),
	(("file", "upload", "download"), "File Management"),
]

# Directory names, matched against whole path segments.
LAYER_SEGMENTS: List[Tuple[Tuple[str, ...], str]] = [
	(("controllers", "routes"), "Presentation Layer"),
	(("services", "business"), "Business Logic Layer"),
	(("models", "entities"), "Data Layer"),
	(("middleware", "interceptors"), "Middleware Layer"),
	(("utils", "helpers"), "Utility Layer"),
	(("config", "settings"), "Configuration Layer"),
]

FALLBACK_MARKERS: Tuple[str, ...] = ("fallback", "default", "else")
LOGGING_MARKERS: Tuple[str, ...] = ("console.", "logger", "logging", "log(")

DATA_FLOW_KEYWORDS: Dict[str, Tuple[str, ...]] = {
	"inputs": ("read", "input", "get"),
	"outputs": ("write", "output", "return"),
	"transformations": ("map", "filter", "reduce"),
	"side_effects": ("console.log", "print(", "fs.write", "db.insert"),
	"data_structures": ("array", "object", "map", "set", "list", "dict"),
}

OPTIMIZATION_KEYWORDS: Tuple[str, ...] = ("cache", "memoize", "optimize")

SECRET_MARKERS: Tuple[str, ...] = ("password", "secret", "key")
VALIDATION_MARKERS: Tuple[str, ...] = ("validate", "check", "assert")

CALL_EXCLUSIONS = frozenset({"if", "for", "while", "switch", "catch"})

# Brace-family control keywords that look like calls but never start a member.
CONTROL_KEYWORDS = frozenset({
	"if", "for", "while", "switch", "catch", "return", "typeof", "new",
	"throw", "delete", "await", "yield", "super", "function", "else", "do",
	"try", "case",
})

NODE_BUILTINS = frozenset({
	"assert", "buffer", "child_process", "cluster", "crypto", "dgram", "dns",
	"events", "fs", "fs/promises", "http", "http2", "https", "net", "os",
	"path", "perf_hooks", "process", "querystring", "readline", "stream",
	"string_decoder", "timers", "tls", "url", "util", "v8", "vm", "worker_threads",
	"zlib",
})
