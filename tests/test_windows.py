from home_fixtures.windows import DateWindow, find_form, locate_date_windows, locate_windows


def test_window_is_centred_on_first_occurrence():
    document = "x" * 100 + "Aug 30, 2025" + "y" * 100 + "Aug 30, 2025" + "z" * 100

    windows = locate_windows(document, ["Aug 30, 2025"], radius=10)

    assert windows == ["x" * 10 + "Aug 30, 2025" + "y" * 10]


def test_window_is_clamped_to_document_bounds():
    document = "Aug 30, 2025 then the games"

    windows = locate_windows(document, ["Aug 30, 2025"], radius=8000)

    assert windows == [document]


def test_one_window_per_form_found():
    document = "Aug 30, 2025" + "." * 50 + "8/31/2025" + "." * 50

    windows = locate_windows(document, ["Aug 30, 2025", "8/31/2025", "September 6, 2025"], radius=5)

    assert len(windows) == 2
    assert "Aug 30, 2025" in windows[0]
    assert "8/31/2025" in windows[1]


def test_identical_windows_are_not_repeated():
    document = "Aug 30, 2025 and 08/30/2025"

    windows = locate_windows(document, ["Aug 30, 2025", "08/30/2025"], radius=8000)

    assert windows == [document]


def test_whole_document_when_no_form_found():
    document = "<p>No dates on this page</p>"

    assert locate_windows(document, ["Aug 30, 2025"]) == [document]


def test_empty_document_has_no_windows():
    assert locate_windows("", ["Aug 30, 2025"]) == []


def test_numeric_forms_respect_digit_boundaries():
    assert find_form("12/3/2025", "2/3/2025") == -1
    assert find_form("on 2/3/20251", "2/3/2025") == -1
    assert find_form("on 2/3/2025.", "2/3/2025") == 3


def test_forms_match_case_insensitively():
    assert find_form("SATURDAY AUG 30, 2025", "Aug 30, 2025") == 9


def test_date_windows_remember_form_and_offset():
    document = "x" * 100 + "Aug 31, 2025" + "y" * 100

    windows = locate_date_windows(document, ["Aug 30, 2025", "Aug 31, 2025"], radius=10)

    assert windows == [DateWindow(text="x" * 10 + "Aug 31, 2025" + "y" * 10, form="Aug 31, 2025", start=90)]


def test_fallback_date_window_has_no_form():
    assert locate_date_windows("no dates here", ["Aug 30, 2025"]) == [DateWindow(text="no dates here")]
