"""Tests for template evaluation and output sanitizing."""

import pytest

from shaderdocs.core import CatalogEntry, Credits, LicenceDefaults
from shaderdocs.templates import (
    Evaluator,
    RenderDepthError,
    Value,
    build_context,
    parse_template,
    sanitize_output,
)
from shaderdocs.templates.parser import If, Literal, Path, Template


# =============================================================================
# INTERPOLATION
# =============================================================================


class TestInterpolation:
    def test_root_paths(self, render):
        assert render("{{statistics.total}} effects, v{{version}}") == "4 effects, v1.9.2"

    def test_unresolvable_path_renders_empty(self, render):
        assert render("[{{nope}}][{{statistics.nope.deeper}}]") == "[][]"

    def test_invalid_expression_renders_empty(self, render):
        assert render("[{{ two words }}]") == "[]"

    def test_comparison_renders_boolean(self):
        scope = Value.of({"type": "BGX"})
        evaluator = Evaluator()
        assert evaluator.render(parse_template('{{(eq type "BGX")}}'), scope) == "true"
        assert evaluator.render(parse_template('{{(ne type "BGX")}}'), scope) == "false"

    def test_no_directives_left(self, render):
        output = render("{{statistics.total}} {{missing}} {{grouped.BGX}}")
        assert "{{" not in output and "}}" not in output

    def test_plain_dict_scope(self):
        evaluator = Evaluator()
        assert evaluator.render(parse_template("{{a.b}}"), {"a": {"b": 1}}) == "1"


# =============================================================================
# EACH
# =============================================================================


class TestEach:
    def test_rows_joined_with_newline_in_order(self, render):
        assert render("{{#each flattened}}{{name}}{{/each}}") == (
            "Vortex\nBlueCorona\nStage Spotlights\nMotion Trails"
        )

    def test_empty_list_renders_nothing(self, render):
        assert render("[{{#each grouped.GFX}}{{name}}{{/each}}]") == "[]"

    def test_missing_list_renders_nothing(self, render):
        assert render("[{{#each grouped.NOPE}}{{name}}{{/each}}]") == "[]"

    def test_non_list_renders_nothing(self, render):
        assert render("[{{#each statistics.total}}x{{/each}}]") == "[]"

    def test_item_scope_hides_root(self, render):
        # statistics exists at the root but not on an entry
        assert render("{{#each grouped.BGX}}{{name}}:{{statistics.total}}{{/each}}") == (
            "Vortex:\nBlueCorona:"
        )

    def test_this_refers_to_item(self):
        scope = Value.of({"tags": ["glow", "audio"]})
        output = Evaluator().render(parse_template("{{#each tags}}- {{this}}{{/each}}"), scope)
        assert output == "- glow\n- audio"

    def test_row_count_matches_items(self):
        scope = Value.of({"items": [{"n": i} for i in range(7)]})
        output = Evaluator().render(parse_template("{{#each items}}{{n}}{{/each}}"), scope)
        assert output.split("\n") == [str(i) for i in range(7)]

    def test_each_inside_if_uses_root_scope(self, render):
        output = render("{{#if version}}{{#each adapted}}{{name}}{{/each}}{{/if}}")
        assert output == "BlueCorona"

    def test_each_inside_false_if_omitted(self, render):
        assert render("{{#if nope}}{{#each flattened}}{{name}}{{/each}}{{/if}}") == ""

    def test_values_inserted_verbatim(self):
        scope = Value.of({"items": [{"name": "{{version}}"}], "version": "9"})
        output = Evaluator().render(parse_template("{{#each items}}{{name}}{{/each}}"), scope)
        assert output == "{{version}}"


# =============================================================================
# IF AND PREDICATES
# =============================================================================


class TestIf:
    def test_truthy_path(self, render):
        assert render("{{#if version}}yes{{/if}}") == "yes"

    def test_absent_path(self, render):
        assert render("{{#if nope}}yes{{/if}}") == ""

    def test_zero_is_truthy(self):
        scope = Value.of({"count": 0})
        assert Evaluator().render(parse_template("{{#if count}}yes{{/if}}"), scope) == "yes"

    @pytest.mark.parametrize("raw", [False, "", None])
    def test_falsy_values(self, raw):
        scope = Value.of({"flag": raw})
        assert Evaluator().render(parse_template("{{#if flag}}yes{{/if}}"), scope) == ""

    def test_eq_predicate(self):
        template = parse_template('{{#if (eq type "BGX")}}X{{/if}}')
        evaluator = Evaluator()
        assert evaluator.render(template, Value.of({"type": "VFX"})) == ""
        assert evaluator.render(template, Value.of({"type": "BGX"})) == "X"

    def test_ne_predicate(self):
        template = parse_template('{{#if (ne type "BGX")}}X{{/if}}')
        evaluator = Evaluator()
        assert evaluator.render(template, Value.of({"type": "VFX"})) == "X"
        assert evaluator.render(template, Value.of({"type": "BGX"})) == ""

    def test_comparison_is_single_level(self):
        scope = Value.of({"credits": {"licence": "MIT"}})
        template = parse_template('{{#if (eq credits.licence "MIT")}}X{{/if}}')
        assert Evaluator().render(template, scope) == ""

    def test_comparison_with_absent_field(self):
        evaluator = Evaluator()
        assert evaluator.render(parse_template('{{#if (eq type "")}}X{{/if}}'), Value.of({})) == ""
        assert evaluator.render(parse_template('{{#if (ne type "")}}X{{/if}}'), Value.of({})) == "X"

    def test_comparison_uses_text_form(self):
        template = parse_template('{{#if (eq count "3")}}X{{/if}}')
        assert Evaluator().render(template, Value.of({"count": 3})) == "X"

    def test_invalid_predicate_is_false(self, render):
        assert render("{{#if (gt a 1)}}X{{/if}}") == ""

    def test_predicate_inside_each(self, render):
        output = render('{{#each flattened}}{{#if (eq type "BGX")}}{{name}}{{/if}}{{/each}}')
        assert output == "Vortex\nBlueCorona\n\n"


# =============================================================================
# DOCUMENTED EXAMPLE
# =============================================================================


class TestCatalogExample:
    def test_suppressed_licence_and_credit_rendering(self):
        entries = [
            CatalogEntry(name="Vortex", filename="v.fx", type="BGX", licence="CC BY 4.0"),
            CatalogEntry(
                name="BlueCorona",
                filename="b.fx",
                type="BGX",
                licence="CC BY 4.0",
                credits=Credits(original_author="Foo"),
            ),
        ]
        context = build_context(entries, LicenceDefaults(text="CC BY 4.0"))
        assert all(e.field("licence").is_absent for e in context.flattened)

        template = parse_template(
            "{{#each grouped.BGX}}{{name}}"
            "{{#if credits.originalAuthor}} (by {{credits.originalAuthor}}){{/if}}\n"
            "{{/each}}"
        )
        assert Evaluator().render(template, context) == "Vortex\nBlueCorona (by Foo)"


# =============================================================================
# PURITY AND LIMITS
# =============================================================================


class TestDeterminism:
    def test_repeat_render_identical(self, context):
        source = (
            "{{statistics.total}}\n{{#each flattened}}{{name}}{{#if licence}} ({{licence}})"
            "{{/if}}{{/each}}\n{{#each adapted}}{{credits.originalAuthor}}{{/each}}"
        )
        template = parse_template(source)
        evaluator = Evaluator()
        first = evaluator.render(template, context)
        second = evaluator.render(template, context)
        assert first == second
        assert evaluator.render(parse_template(source), context) == first


class TestDepthLimit:
    def test_deep_if_nesting_raises(self):
        depth = 10
        source = "{{#if a}}" * depth + "x" + "{{/if}}" * depth
        evaluator = Evaluator(max_depth=5)
        with pytest.raises(RenderDepthError) as exc:
            evaluator.render(parse_template(source), Value.of({"a": True}))
        assert exc.value.limit == 5

    def test_nesting_within_limit(self):
        depth = 5
        source = "{{#if a}}" * depth + "x" + "{{/if}}" * depth
        assert Evaluator(max_depth=5).render(parse_template(source), Value.of({"a": True})) == "x"

    def test_hand_built_tree_is_bounded(self):
        node = Literal("x")
        for _ in range(50):
            node = If(Path(("a",)), (node,))
        with pytest.raises(RenderDepthError):
            Evaluator(max_depth=20).render(Template((node,)), Value.of({"a": True}))


# =============================================================================
# SANITIZER
# =============================================================================


class TestSanitizeOutput:
    def test_clean_text_untouched(self):
        assert sanitize_output("plain text") == "plain text"

    def test_leftover_directives_removed(self):
        assert sanitize_output("a{{x}}b{{#if y}}c") == "abc"

    def test_stray_braces_removed(self):
        assert sanitize_output("a {{ b }} c }}") == "a  c "

    def test_directive_does_not_span_lines(self):
        assert sanitize_output("open {{ here\nkeep\nclose }} here") == "open  here\nkeep\nclose  here"

    def test_braces_in_separate_entries_keep_every_row(self):
        entries = [
            CatalogEntry(name=name, filename=f"{name}.fx", type="BGX", short_description=text)
            for name, text in [
                ("Alpha", "Uses {{ as an open marker"),
                ("Beta", "plain"),
                ("Gamma", "closes with }} here"),
            ]
        ]
        template = parse_template(
            "{{#each flattened}}\n### {{name}}\n{{shortDescription}}\n{{/each}}"
        )
        output = sanitize_output(Evaluator().render(template, build_context(entries)))
        assert output == (
            "### Alpha\nUses  as an open marker\n"
            "### Beta\nplain\n"
            "### Gamma\ncloses with  here"
        )

    def test_logs_warning(self, caplog):
        with caplog.at_level("WARNING"):
            sanitize_output("{{x}}", name="README.md")
        assert "README.md" in caplog.text
