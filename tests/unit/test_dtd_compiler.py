"""
Tests for DTD element declaration compilation.

Covers classification of each content type, declaration line tracking,
comment handling, duplicate declarations and isolation of malformed
content specs.
"""

import unittest

from xml_dtd_validator.dtd.compiler import ContentModelCompiler, parse_mixed_children, strip_inline_comments
from xml_dtd_validator.exceptions import DTDParsingError
from xml_dtd_validator.models import ContentType


class TestParseMixedChildren(unittest.TestCase):
    """Test allowed-children extraction from mixed specs."""

    def test_children_listed(self):
        self.assertEqual(parse_mixed_children("(#PCDATA|b|i)*"), ("b", "i"))

    def test_pcdata_star_has_no_children(self):
        self.assertEqual(parse_mixed_children("(#PCDATA)*"), ())

    def test_empty_alternatives_and_duplicates_ignored(self):
        self.assertEqual(parse_mixed_children("(#PCDATA||b|b|i)*"), ("b", "i"))

    def test_without_trailing_star(self):
        self.assertEqual(parse_mixed_children("(#PCDATA|em)"), ("em",))


class TestStripInlineComments(unittest.TestCase):

    def test_inline_comment_removed(self):
        self.assertEqual(strip_inline_comments("(a, b) -- trailing note --"), "(a, b) ")


class TestContentModelCompiler(unittest.TestCase):
    """Test DefinitionTable construction."""

    def setUp(self):
        self.compiler = ContentModelCompiler()

    def test_classification(self):
        dtd = "\n".join([
            "<!ELEMENT br EMPTY>",
            "<!ELEMENT any ANY>",
            "<!ELEMENT title (#PCDATA)>",
            "<!ELEMENT para (#PCDATA | em | strong)*>",
            "<!ELEMENT doc (title, para+)>",
        ])
        table = self.compiler.compile(dtd)

        self.assertEqual(len(table), 5)
        self.assertEqual(table.get("br").content_type, ContentType.EMPTY)
        self.assertEqual(table.get("any").content_type, ContentType.ANY)
        self.assertEqual(table.get("title").content_type, ContentType.PCDATA)
        self.assertEqual(table.get("para").content_type, ContentType.MIXED)
        self.assertEqual(table.get("para").allowed_mixed_children, ("em", "strong"))
        self.assertEqual(table.get("doc").content_type, ContentType.CHILDREN)
        self.assertIsNotNone(table.get("doc").matcher)

    def test_declaration_lines(self):
        dtd = "<!-- header -->\n\n<!ELEMENT a (b)>\n<!ELEMENT b EMPTY>"
        table = self.compiler.compile(dtd)

        self.assertEqual(table.get("a").declaration_line, 3)
        self.assertEqual(table.get("b").declaration_line, 4)

    def test_multiline_declaration_reports_first_line(self):
        dtd = "<!ELEMENT note\n    (to,\n     from)>"
        table = self.compiler.compile(dtd)

        self.assertEqual(table.get("note").declaration_line, 1)
        self.assertEqual(table.get("note").display_spec, "(to, from)")

    def test_pcdata_with_whitespace_is_pcdata(self):
        table = self.compiler.compile("<!ELEMENT t ( #PCDATA )>")
        self.assertEqual(table.get("t").content_type, ContentType.PCDATA)

    def test_pcdata_star_is_mixed_without_children(self):
        table = self.compiler.compile("<!ELEMENT t (#PCDATA)*>")

        self.assertEqual(table.get("t").content_type, ContentType.MIXED)
        self.assertEqual(table.get("t").allowed_mixed_children, ())

    def test_commented_out_declaration_ignored(self):
        dtd = "<!ELEMENT a EMPTY>\n<!--\n<!ELEMENT b EMPTY>\n-->\n<!ELEMENT c EMPTY>"
        table = self.compiler.compile(dtd)

        self.assertNotIn("b", table)
        self.assertEqual(table.get("c").declaration_line, 5)

    def test_inline_comment_stripped_from_spec(self):
        table = self.compiler.compile("<!ELEMENT a (b, c) -- children -->")
        self.assertEqual(table.get("a").content_type, ContentType.CHILDREN)
        self.assertTrue(table.get("a").matcher.matches(["b", "c"]))

    def test_later_declaration_wins(self):
        dtd = "<!ELEMENT a EMPTY>\n<!ELEMENT a (#PCDATA)>"
        table = self.compiler.compile(dtd)

        self.assertEqual(len(table), 1)
        self.assertEqual(table.get("a").content_type, ContentType.PCDATA)
        self.assertEqual(table.get("a").declaration_line, 2)

    def test_other_declarations_ignored(self):
        dtd = '<!ATTLIST a id ID #REQUIRED>\n<!ENTITY x "y">\n<!ELEMENT a EMPTY>'
        table = self.compiler.compile(dtd)

        self.assertEqual(table.names(), ["a"])

    def test_malformed_spec_degrades_to_any_in_isolation(self):
        """A broken content model affects only its own element."""
        dtd = "<!ELEMENT good (x, y)>\n<!ELEMENT bad (x, (y)>\n<!ELEMENT x EMPTY>\n<!ELEMENT y EMPTY>"

        with self.assertLogs('xml_dtd_validator.dtd.compiler', level='WARNING') as captured:
            table = self.compiler.compile(dtd)

        self.assertEqual(table.get("bad").content_type, ContentType.ANY)
        self.assertEqual(table.get("good").content_type, ContentType.CHILDREN)
        self.assertEqual(len(table), 4)
        self.assertEqual(self.compiler.degraded_elements, ["bad"])
        self.assertTrue(any("bad" in message for message in captured.output))

    def test_no_declarations_raises(self):
        with self.assertRaises(DTDParsingError):
            self.compiler.compile("<!ATTLIST a id ID #REQUIRED>")
        with self.assertRaises(DTDParsingError):
            self.compiler.compile("")

    def test_iteration_in_declaration_order(self):
        table = self.compiler.compile("<!ELEMENT z EMPTY>\n<!ELEMENT a EMPTY>\n<!ELEMENT m EMPTY>")
        self.assertEqual([definition.name for definition in table], ["z", "a", "m"])


if __name__ == '__main__':
    unittest.main()
