from sarathi.lang.classifier import detect_transcript_language
from sarathi.lang.script_detect import has_devanagari, has_non_ascii, is_indic_script


def test_detect_english_sentence() -> None:
    assert detect_transcript_language("I feel lost and I need help with the exam") == "english"


def test_detect_hindi_sentence() -> None:
    assert detect_transcript_language("तुम कैसे हो?") == "hindi"


def test_detect_hinglish_latin() -> None:
    assert detect_transcript_language("mera dil nahi lagta") == "hinglish"


def test_detect_mixed_devanagari() -> None:
    # Script beats lexical signals even when English words dominate.
    assert detect_transcript_language("the and but is are feel help भैया") == "hindi"


def test_any_non_ascii_counts_as_hindi() -> None:
    assert detect_transcript_language("I love café mornings") == "hindi"


def test_tie_resolves_to_english() -> None:
    assert detect_transcript_language("dil is") == "english"


def test_script_helpers() -> None:
    assert has_devanagari("नमस्ते")
    assert not has_devanagari("namaste")
    assert has_non_ascii("naïve")
    assert not has_non_ascii("plain text")
    assert not is_indic_script(None)
