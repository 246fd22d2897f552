"""
Tests for the start-tag occurrence scanner and masking helpers.
"""

import unittest

from xml_dtd_validator.parsing.tag_scanner import (
    TagOccurrenceScanner,
    mask_comments,
    mask_literal_blocks,
)


class TestMasking(unittest.TestCase):
    """Test that masked spans keep offsets and line counts."""

    def test_comment_masked_with_equal_length(self):
        text = "<a><!-- <b/> --></a>"
        masked = mask_comments(text)
        self.assertEqual(len(masked), len(text))
        self.assertNotIn("<b/>", masked)
        self.assertTrue(masked.startswith("<a>"))
        self.assertTrue(masked.endswith("</a>"))

    def test_multiline_comment_keeps_newlines(self):
        text = "<a>\n<!--\n<b/>\n-->\n<c/></a>"
        masked = mask_comments(text)
        self.assertEqual(masked.count("\n"), text.count("\n"))
        self.assertEqual(masked.index("<c/>"), text.index("<c/>"))

    def test_cdata_masked(self):
        text = "<a><![CDATA[<fake>]]></a>"
        masked = mask_literal_blocks(text)
        self.assertNotIn("<fake>", masked)
        self.assertEqual(len(masked), len(text))

    def test_processing_instruction_masked(self):
        text = "<a>\n<?pi <b> ?>\n<c/></a>"
        masked = mask_literal_blocks(text)
        self.assertNotIn("<b>", masked)
        self.assertEqual(masked.count("\n"), text.count("\n"))
        self.assertEqual(masked.index("<c/>"), text.index("<c/>"))

    def test_block_markers_inside_other_blocks_are_literal(self):
        text = "<a><![CDATA[<!-- ]]><b/><!-- --></a>"
        masked = mask_literal_blocks(text)
        self.assertEqual(masked.index("<b/>"), text.index("<b/>"))


class TestTagOccurrenceScanner(unittest.TestCase):
    """Test start-tag scanning."""

    def setUp(self):
        self.scanner = TagOccurrenceScanner()

    def test_scan_in_source_order(self):
        xml = "<root>\n  <a x=\"1\">\n    <b/>\n  </a>\n</root>"
        occurrences = self.scanner.scan(xml)

        self.assertEqual([o.tag_name for o in occurrences], ["root", "a", "b"])
        self.assertEqual([o.line for o in occurrences], [1, 2, 3])
        self.assertEqual(occurrences[1].offset, xml.index("<a"))

    def test_closing_tags_declarations_and_pis_ignored(self):
        xml = '<?xml version="1.0"?>\n<!DOCTYPE root>\n<?pi data?>\n<root></root>'
        occurrences = self.scanner.scan(xml)

        self.assertEqual(len(occurrences), 1)
        self.assertEqual(occurrences[0].tag_name, "root")
        self.assertEqual(occurrences[0].line, 4)

    def test_tags_in_comments_and_cdata_not_reported(self):
        xml = "<root>\n<!-- <ghost/> -->\n<![CDATA[<phantom>]]>\n<real/>\n</root>"
        names = [o.tag_name for o in self.scanner.scan(xml)]

        self.assertEqual(names, ["root", "real"])

    def test_markup_inside_processing_instruction_not_reported(self):
        xml = "<root>\n<?pi <a> ?>\n<a/>\n</root>"
        occurrences = self.scanner.scan(xml)

        self.assertEqual([o.tag_name for o in occurrences], ["root", "a"])
        self.assertEqual(occurrences[1].line, 3)

    def test_prefixed_and_punctuated_names(self):
        xml = "<ns:root><my-el.v2/><x_y/></ns:root>"
        names = [o.tag_name for o in self.scanner.scan(xml)]

        self.assertEqual(names, ["ns:root", "my-el.v2", "x_y"])

    def test_multiline_start_tag_reports_line_of_open_bracket(self):
        xml = "<root>\n<item\n   a=\"1\"\n   b=\"2\"/>\n</root>"
        occurrences = self.scanner.scan(xml)

        self.assertEqual(occurrences[1].line, 2)

    def test_empty_text(self):
        self.assertEqual(self.scanner.scan(""), [])


if __name__ == '__main__':
    unittest.main()
