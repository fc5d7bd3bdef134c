"""
Function Signature Builder tests: skip rules, fatal input-format
violations, and symbol registration.
"""

import os
import sys
import unittest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from ffigen.errors import InputFormatError
from ffigen.native_types import NativePrimitive as P, NativeStruct
from ffigen.pipeline import generate

from c2ffi_records import ctype, decode, field, function, param, struct, typedef


class TestSkipRules(unittest.TestCase):

    def test_variadic_skipped_even_when_mappable(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            ctx = generate(decode([
                function("printf", [param("fmt", ctype(":pointer"))], ctype(":int"), variadic=True),
            ]))
        self.assertNotIn("printf", ctx.symbols)
        self.assertEqual(ctx.stats.functions_total, 1)
        self.assertEqual(ctx.stats.functions_generated, 0)
        self.assertEqual(logs.output, ["WARNING:ffigen.context:skipping printf. reason: variadic"])

    def test_inline_skipped(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            ctx = generate(decode([
                function("fast_abs", [param("x", ctype(":int"))], ctype(":int"), inline=True),
            ]))
        self.assertEqual(ctx.symbols, {})
        self.assertIn("reason: inline", logs.output[0])

    def test_inline_reported_before_variadic(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            generate(decode([function("f", [], ctype(":void"), inline=True, variadic=True)]))
        self.assertIn("reason: inline", logs.output[0])

    def test_unmapped_parameter_skips_function(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            ctx = generate(decode([
                function("open_widget", [param("w", ctype("struct_widget"))], ctype(":int")),
            ]))
        self.assertEqual(ctx.symbols, {})
        self.assertEqual(ctx.stats.functions_total, 1)
        self.assertEqual(ctx.stats.functions_generated, 0)
        self.assertEqual(ctx.stats.functions_skipped, 1)
        self.assertIn("skipping open_widget. reason: parameter", logs.output[0])
        self.assertIn("struct_widget", logs.output[0])

    def test_first_unmapped_parameter_is_reported(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            generate(decode([
                function("g", [
                    param("a", ctype(":int")),
                    param("b", ctype("first_bad")),
                    param("c", ctype("second_bad")),
                ], ctype(":void")),
            ]))
        self.assertIn("first_bad", logs.output[0])
        self.assertNotIn("second_bad", logs.output[0])

    def test_unmapped_return_type_skips_function(self):
        with self.assertLogs("ffigen", level="WARNING") as logs:
            ctx = generate(decode([function("sinf", [], ctype(":float"))]))
        self.assertEqual(ctx.symbols, {})
        self.assertIn("skipping sinf. reason: return type", logs.output[0])


class TestFatalViolations(unittest.TestCase):

    def test_bad_parameter_tag_aborts(self):
        defs = decode([function("f", [param("x", ctype(":int"), tag="field")], ctype(":int"))])
        with self.assertRaises(InputFormatError) as cm:
            generate(defs)
        self.assertIn("'field'", str(cm.exception))
        self.assertIn("f @ test.h:1:1", str(cm.exception))

    def test_void_parameter_aborts(self):
        defs = decode([function("f", [param("nothing", ctype(":void"))], ctype(":int"))])
        with self.assertRaises(InputFormatError) as cm:
            generate(defs)
        self.assertIn("void parameter 'nothing'", str(cm.exception))

    def test_void_through_typedef_aborts(self):
        defs = decode([
            typedef("VOID", ctype(":void")),
            function("f", [param("v", ctype("VOID"))], ctype(":int")),
        ])
        with self.assertRaises(InputFormatError):
            generate(defs)

    def test_bad_tag_after_unmapped_parameter_still_aborts(self):
        defs = decode([function("f", [
            param("a", ctype("unknown_t")),
            param("b", ctype(":int"), tag="bogus"),
        ], ctype(":int"))])
        with self.assertRaises(InputFormatError):
            generate(defs)


class TestRegistration(unittest.TestCase):

    def test_parameters_in_declared_order(self):
        ctx = generate(decode([
            function("memcpy", [
                param("dst", ctype(":pointer")),
                param("src", ctype(":pointer")),
                param("n", ctype(":unsigned-long")),
            ], ctype(":pointer"), location="/usr/include/string.h:43:14"),
        ]))
        entry = ctx.symbols["memcpy"]
        self.assertEqual(entry.parameters, [P.POINTER, P.POINTER, P.U64])
        self.assertIs(entry.result, P.POINTER)
        self.assertEqual(entry.doc, "memcpy @ /usr/include/string.h:43:14")
        self.assertEqual(ctx.stats.functions_generated, 1)

    def test_function_declared_before_its_typedef_is_skipped(self):
        ctx = generate(decode([
            function("getpid", [], ctype("__pid_t")),
            typedef("__pid_t", ctype(":int")),
            function("getppid", [], ctype("__pid_t")),
        ]))
        self.assertEqual(list(ctx.symbols), ["getppid"])

    def test_redeclared_function_appears_once(self):
        """The first declaration keeps the binding; later ones are dropped."""
        ctx = generate(decode([
            function("abs", [param("x", ctype(":int"))], ctype(":int")),
            function("abs", [param("x", ctype(":int"))], ctype(":int"), location="other.h:2:1"),
        ]))
        self.assertEqual(list(ctx.symbols), ["abs"])
        self.assertEqual(ctx.symbols["abs"].doc, "abs @ test.h:1:1")

    def test_void_result_and_resolved_typedefs(self):
        ctx = generate(decode([
            typedef("__uint32_t", ctype(":unsigned-int")),
            struct("pair", [field("a", ctype(":int")), field("b", ctype(":int"))]),
            function("consume", [
                param("tag", ctype("__uint32_t")),
                param("p", ctype("pair")),
            ], ctype(":void")),
        ]))
        entry = ctx.symbols["consume"]
        self.assertEqual(entry.parameters, [P.U32, NativeStruct((P.I32, P.I32))])
        self.assertIs(entry.result, P.VOID)

    def test_no_parameters(self):
        ctx = generate(decode([function("rand", [], ctype(":int"))]))
        self.assertEqual(ctx.symbols["rand"].parameters, [])


if __name__ == "__main__":
    unittest.main()
