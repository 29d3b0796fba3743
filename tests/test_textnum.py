from nwdamage.textnum import extract_numbers


def test_empty_text():
    assert extract_numbers("") == []


def test_unterminated_token_is_dropped():
    assert extract_numbers("a = 1.5, 2") == ["1.5"]


def test_signed_numbers_in_parentheses():
    assert extract_numbers("(1,-2) ") == ["1", "-2"]


def test_words_only():
    assert extract_numbers("abc def ") == []


def test_letters_after_start_are_kept():
    assert extract_numbers("x1y ") == ["1y"]
    assert extract_numbers("[3e5] ") == ["3e5"]


def test_tokens_are_substrings_of_input():
    text = "{+4.0, .25} [7] = 8 "
    tokens = extract_numbers(text)
    assert tokens == ["+4.0", ".25", "7", "8"]
    assert all(token in text for token in tokens)