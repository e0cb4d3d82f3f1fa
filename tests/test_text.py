from apibake.pdf.text import wrap_text

# Courier glyphs are 600/1000 em wide: 6pt per character at size 10
FONT = "Courier"
SIZE = 10


class TestWrapText:
    def test_short_text_is_one_line(self):
        assert wrap_text("hello", FONT, SIZE, 100, 100) == ["hello"]

    def test_breaks_between_words(self):
        assert wrap_text("aaa bbb", FONT, SIZE, 40, 40) == ["aaa", "bbb"]

    def test_explicit_newlines_are_kept(self):
        assert wrap_text("a\nb", FONT, SIZE, 100, 100) == ["a", "b"]

    def test_leading_indentation_is_kept(self):
        assert wrap_text('{\n  "id": 1\n}', FONT, SIZE, 200, 200) == ["{", '  "id": 1', "}"]

    def test_continued_line_without_room_starts_below(self):
        assert wrap_text("hello", FONT, SIZE, 5, 60) == ["", "hello"]

    def test_long_word_is_split(self):
        assert wrap_text("abcdefghij", FONT, SIZE, 30, 30) == ["abcde", "fghij"]

    def test_empty_text(self):
        assert wrap_text("", FONT, SIZE, 100, 100) == [""]
