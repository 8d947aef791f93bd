import random
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from gpumeter_renderer.models import MetricsSnapshot
from gpumeter_renderer.template import MAX_OUTPUT, render


def snap(gpu: int = 0, vram: int = 0) -> MetricsSnapshot:
    return MetricsSnapshot(primary_percent=gpu, secondary_percent=vram)


class VariableTests(unittest.TestCase):
    def test_plain_values_cover_full_range(self):
        for value in range(0, 101):
            self.assertEqual(render("$g", snap(value, 100 - value)), str(value))
            self.assertEqual(render("$v", snap(100 - value, value)), str(value))

    def test_labelled_values(self):
        self.assertEqual(render("$G", snap(42, 13)), "GPU 42%")
        self.assertEqual(render("$V", snap(99, 7)), "VRAM 7%")
        self.assertEqual(render("$G $V", snap(0, 100)), "GPU 0% VRAM 100%")

    def test_unknown_variable_is_literal(self):
        self.assertEqual(render("$q", snap()), "$q")
        self.assertEqual(render("$$g", snap(5)), "$$g")

    def test_trailing_dollar_is_kept(self):
        self.assertEqual(render("abc$", snap()), "abc$")
        self.assertEqual(render("$", snap()), "$")

    def test_dollar_swallows_following_backslash(self):
        self.assertEqual(render("$\\n", snap()), "$\\n")


class EscapeTests(unittest.TestCase):
    def test_locally_resolved_codes(self):
        self.assertEqual(render("\\.", snap()), ".")
        self.assertEqual(render("\\n\\r", snap()), "\n\r")

    def test_unknown_escape_passes_through(self):
        self.assertEqual(render("\\z", snap()), "\\z")
        self.assertEqual(render("\\t", snap()), "\\t")
        self.assertEqual(render("\\\\", snap()), "\\\\")

    def test_trailing_backslash_is_dropped(self):
        self.assertEqual(render("abc\\", snap()), "abc")
        self.assertEqual(render("\\", snap()), "")

    def test_width_and_selector_pass_through(self):
        self.assertEqual(render("\\w123\\D0", snap()), "\\w123\\D0")
        self.assertEqual(render("\\w", snap()), "\\w")
        self.assertEqual(render("\\ww", snap()), "\\ww")

    def test_selector_only_takes_zero_or_one(self):
        self.assertEqual(render("\\D1$g", snap(8)), "\\D18")
        self.assertEqual(render("\\d0", snap()), "\\d0")
        self.assertEqual(render("\\D2$V", snap(0, 3)), "\\D2VRAM 3%")
        self.assertEqual(render("\\D", snap()), "\\D")

    def test_format_and_small_font_take_no_payload(self):
        self.assertEqual(render("\\f$g", snap(12)), "\\f12")
        self.assertEqual(render("\\s$v", snap(0, 4)), "\\s4")

    def test_attribute_consumes_next_character(self):
        self.assertEqual(render("\\ag\\.$g%", snap(50)), "\\ag.50%")
        self.assertEqual(render("\\a$g", snap(50)), "\\a$g")
        self.assertEqual(render("\\a\\n", snap()), "\\a\\n")
        self.assertEqual(render("\\a", snap()), "\\a")

    def test_default_format(self):
        self.assertEqual(render("\\D2$V\\D0\\t\\f$G", snap(42, 17)), "\\D2VRAM 17%\\D0\\t\\fGPU 42%")


class BoundTests(unittest.TestCase):
    def test_empty_and_missing_template(self):
        self.assertEqual(render("", snap(1, 2)), "")
        self.assertEqual(render(None, snap(1, 2)), "")

    def test_plain_text_is_unchanged(self):
        rng = random.Random(1234)
        alphabet = "abcXYZ 019%.\t\n#{}"
        for _ in range(50):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, MAX_OUTPUT)))
            self.assertEqual(render(text, snap(3, 4)), text)

    def test_long_plain_text_is_truncated(self):
        self.assertEqual(render("x" * 2000, snap()), "x" * MAX_OUTPUT)

    def test_repeated_substitutions_stay_bounded(self):
        for gpu in (0, 7, 42, 100):
            out = render("$g" * 1000, snap(gpu))
            self.assertEqual(out, (str(gpu) * 1000)[:MAX_OUTPUT])
        out = render("$G" * 400, snap(100))
        self.assertEqual(len(out), MAX_OUTPUT)
        self.assertEqual(out[:16], "GPU 100%GPU 100%")

    def test_label_is_cut_at_bound(self):
        out = render("a" * 497 + "$G", snap(42))
        self.assertEqual(out, "a" * 497 + "GPU")

    def test_style_token_is_not_split_at_bound(self):
        out = render("a" * 499 + "\\D0tail", snap())
        self.assertEqual(out, "a" * 499)
        out = render("a" * 497 + "\\w12345", snap())
        self.assertEqual(out, "a" * 497)
        out = render("a" * 497 + "\\D0", snap())
        self.assertEqual(out, "a" * 497 + "\\D0")

    def test_fuzzed_templates_never_exceed_bound(self):
        rng = random.Random(99)
        alphabet = "\\$gvGVDdfas.nrwz0123456789 x"
        for _ in range(300):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 1500)))
            out = render(text, snap(rng.randint(0, 100), rng.randint(0, 100)))
            self.assertLessEqual(len(out), MAX_OUTPUT)

    def test_custom_bound(self):
        self.assertEqual(render("$G", snap(42), max_output=5), "GPU 4")

    def test_calls_do_not_share_state(self):
        template = "\\D0$G\\D1$V"
        self.assertEqual(render(template, snap(1, 2)), "\\D0GPU 1%\\D1VRAM 2%")
        self.assertEqual(render(template, snap(90, 80)), "\\D0GPU 90%\\D1VRAM 80%")
        self.assertEqual(render(template, snap(1, 2)), "\\D0GPU 1%\\D1VRAM 2%")


class SnapshotTests(unittest.TestCase):
    def test_clamped_constructor(self):
        self.assertEqual(MetricsSnapshot.clamped(-5, 250), snap(0, 100))
        self.assertEqual(MetricsSnapshot.clamped(42.9, 7), snap(42, 7))


if __name__ == "__main__":
    unittest.main()
