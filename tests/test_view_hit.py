from see_code.diff.parser import parse_diff
from see_code.view.hit import hit_test, locate, ToggledFile, ToggledHunk, NoTarget
from see_code.view.layout import Style, BandKind, iter_bands, content_height

SCENARIO_A = b"diff --git a/foo.c b/foo.c\n@@ -1,2 +1,2 @@\n-old\n+new\n context\n"
TWO_FILES = (
    b"diff --git a/a.py b/a.py\n@@ -1 +1 @@\n-a\n+b\n@@ -9 +9,2 @@\n x\n+y\n"
    b"diff --git a/b.py b/b.py\n@@ -1 +1 @@\n+only\n"
)

S = Style()

def _flags(tree):
    return [(f.collapsed, [h.collapsed for h in f.hunks]) for f in tree.files]

def test_scenario_c_file_header_midpoint_toggles_back_and_forth():
    tree = parse_diff(SCENARIO_A)
    mid = S.file_header_height / 2
    assert hit_test(tree, 10, mid, 0, S) == ToggledFile(0)
    assert tree.files[0].collapsed is True
    assert hit_test(tree, 10, mid, 0, S) == ToggledFile(0)
    assert tree.files[0].collapsed is False

def test_hunk_header_toggle():
    tree = parse_diff(SCENARIO_A)
    assert hit_test(tree, 0, 36 + 1, 0, S) == ToggledHunk(0, 0)
    assert tree.files[0].hunks[0].collapsed is True
    assert tree.files[0].collapsed is False

def test_band_edges_are_half_open():
    tree = parse_diff(SCENARIO_A)
    assert hit_test(tree, 0, 0, 0, S) == ToggledFile(0)
    hit_test(tree, 0, 0, 0, S)
    # y == 36 appartient à l'en-tête du hunk, pas à celui du fichier
    assert hit_test(tree, 0, 36, 0, S) == ToggledHunk(0, 0)

def test_scroll_offset_is_added():
    tree = parse_diff(TWO_FILES)
    second_file_top = next(b.top for b in iter_bands(tree, S) if b.kind is BandKind.FILE_HEADER and b.file_index == 1)
    assert hit_test(tree, 0, 5, second_file_top, S) == ToggledFile(1)
    assert tree.files[1].collapsed is True
    assert tree.files[0].collapsed is False

def test_body_lines_margins_and_empty_space_are_no_target():
    tree = parse_diff(SCENARIO_A)
    before = _flags(tree)
    assert isinstance(hit_test(tree, 0, 72 + 1, 0, S), NoTarget)        # ligne "-old"
    assert isinstance(hit_test(tree, 0, 182, 0, S), NoTarget)           # marge du hunk
    assert isinstance(hit_test(tree, 0, 190, 0, S), NoTarget)           # marge du fichier
    assert isinstance(hit_test(tree, 0, 10_000, 0, S), NoTarget)        # sous le contenu
    assert isinstance(hit_test(tree, 0, -5, 0, S), NoTarget)
    assert isinstance(hit_test(None, 0, 10, 0, S), NoTarget)
    assert _flags(tree) == before

def test_headers_inside_collapsed_file_cannot_be_hit():
    tree = parse_diff(SCENARIO_A)
    tree.files[0].collapsed = True
    # là où était l'en-tête du hunk on tombe dans la marge du fichier
    assert isinstance(hit_test(tree, 0, 40, 0, S), NoTarget)
    assert tree.files[0].hunks[0].collapsed is False

def test_collapse_independence():
    tree = parse_diff(TWO_FILES)
    tree.files[0].hunks[1].collapsed = True
    hit_test(tree, 0, 1, 0, S)  # replie a.py
    assert tree.files[0].collapsed is True
    assert [h.collapsed for h in tree.files[0].hunks] == [False, True]
    assert [l.raw for l in tree.files[0].hunks[0].lines] == ["-a", "+b"]
    hit_test(tree, 0, 1, 0, S)  # déplie a.py
    assert hit_test(tree, 0, 37, 0, S) == ToggledHunk(0, 0)
    assert [h.collapsed for h in tree.files[0].hunks] == [True, True]
    assert tree.files[0].collapsed is False
    assert tree.files[1].collapsed is False

def test_hit_walk_agrees_with_layout_after_toggles():
    tree = parse_diff(TWO_FILES)
    for y in (1, 37, 1, 150):
        hit_test(tree, 0, y, 0, S)
        headers = [b for b in iter_bands(tree, S) if b.is_header]
        last = list(iter_bands(tree, S))[-1]
        assert last.bottom == content_height(tree, S)
        for b in headers:
            assert locate(tree, 0, b.top, 0, S) == b

def test_locate_reports_line_without_mutation():
    tree = parse_diff(SCENARIO_A)
    band = locate(tree, 0, 72 + 36 + 1, 0, S)
    assert band.kind is BandKind.LINE and band.line_index == 1
    assert locate(tree, 0, 5000, 0, S) is None
    assert tree.files[0].collapsed is False
