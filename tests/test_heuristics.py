from textwrap import dedent

from repomap.heuristics import (
	analyze_business_logic,
	analyze_configuration,
	analyze_data_flow,
	analyze_error_handling,
	analyze_function_dependencies,
	analyze_performance,
	calculate_complexity,
	detect_design_pattern,
	determine_architectural_layer,
	determine_business_domain,
	determine_file_purpose,
)


def test_complexity_counts_each_branch_token():
	code = "if (a && b) {\n} else if (c) {\n}"
	assert calculate_complexity(code, 1, 3) == 4
	assert calculate_complexity("const x = a ? b : c;", 1, 1) == 2
	# optional markers and optional chaining are not ternaries
	assert calculate_complexity("function f(name?: string) { return a?.b; }", 1, 1) == 1


def test_complexity_indent_family():
	code = "if a and b:\n    pass\nelif c:\n    pass"
	assert calculate_complexity(code, 1, 4, "indent") == 4
	assert calculate_complexity("", 1, 1, "indent") == 1


def test_catch_block_in_small_function():
	code = dedent(
		"""\
		function load() {
		  try {
		    run();
		  } catch (err) { console.log('error: x'); }
		}
		"""
	)
	info = analyze_error_handling(code, 1, 5)
	assert info.try_catch_blocks >= 1
	assert "err" in info.error_types
	assert "error: x" in info.error_messages
	assert "console." in info.logging


def test_python_except_clauses():
	code = "try:\n    go()\nexcept (KeyError, ValueError) as exc:\n    logger.warning('failed')"
	info = analyze_error_handling(code, 1, 4)
	assert info.error_types == ["KeyError", "ValueError"]
	assert "logger" in info.logging


def test_dependencies_skip_control_flow():
	deps = analyze_function_dependencies("foo();\nif (x) { bar(a); foo(); }", 1, 2)
	assert sorted(deps) == ["bar", "foo"]


def test_business_logic_keywords():
	assert analyze_business_logic("validateUser(); saveUser(); validate();", 1, 1) == "validate, save"
	assert analyze_business_logic("return 1;", 1, 1) == "general logic"


def test_data_flow_tags():
	flow = analyze_data_flow("const rows = items.map(x => x).filter(Boolean);\nconsole.log(rows);", 1, 2)
	assert "map" in flow.transformations
	assert "filter" in flow.transformations
	assert "console.log" in flow.side_effects


def test_performance_hints():
	nested = dedent(
		"""\
		for (const a of xs) {
		  for (const b of ys) {
		    use(a, b);
		  }
		}
		"""
	)
	perf = analyze_performance(nested, 1, 5)
	assert "nested_loops" in perf.bottlenecks
	assert perf.time_complexity == "O(n^2)"

	sequential = "const a = await one();\nconst b = await two();\nconst hit = cache.get(a);"
	perf = analyze_performance(sequential, 1, 3)
	assert "sequential_awaits" in perf.bottlenecks
	assert "cache" in perf.optimizations
	assert perf.time_complexity == "O(1)"

	assert analyze_performance("for x in xs:\n    print(x)", 1, 2).time_complexity == "O(n)"


def test_design_pattern_guess():
	assert detect_design_pattern("class Config {\n  static instance;\n}") == "Singleton"
	assert detect_design_pattern("class WidgetFactory {}") == "Factory"
	assert detect_design_pattern("class Plain {\n  run() {}\n}") == "Standard Class"


def test_file_classification():
	assert determine_file_purpose("", "src/user.test.ts") == "Тестирование"
	assert determine_file_purpose("", "src/app.config.ts") == "Конфигурация"
	assert determine_file_purpose("def test_add():\n    pass", "check.py") == "Тестирование"
	assert determine_file_purpose("x = 1", "src/misc.py") == "Общий код"

	assert determine_business_domain("const invoice = createInvoice();") == "Billing & Payments"
	assert determine_business_domain("const x = 1;") == "General Business Logic"

	assert determine_architectural_layer("src/services/user.ts") == "Business Logic Layer"
	assert determine_architectural_layer("src/myservices/user.ts") == "General Layer"


def test_configuration_hints():
	code = "const url = process.env.API_URL;\nDB = os.getenv('DB_URL')\npassword = os.environ['DB_PASSWORD']"
	config = analyze_configuration(code)
	assert config.environment_variables == ["API_URL", "DB_URL", "DB_PASSWORD"]
	assert "password" in config.secrets
