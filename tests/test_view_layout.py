import itertools
from see_code.diff.parser import parse_diff
from see_code.view.layout import Style, BandKind, iter_bands, layout, content_height

SCENARIO_A = b"diff --git a/foo.c b/foo.c\n@@ -1,2 +1,2 @@\n-old\n+new\n context\n"

TWO_FILES = (
    b"diff --git a/a.py b/a.py\n@@ -1 +1 @@\n-a\n+b\n@@ -9 +9,2 @@\n x\n+y\n"
    b"diff --git a/b.py b/b.py\n@@ -1 +1 @@\n+only\n"
    b"diff --git a/c.bin b/c.bin\n"
)

S = Style()

def test_expanded_height_follows_rule():
    tree = parse_diff(SCENARIO_A)
    # en-tête fichier + en-tête hunk + 3 lignes + marge hunk + marge fichier
    assert layout(tree, S).content_height == 36 + 36 + 3 * 36 + 5 + 10

def test_scenario_b_collapsed_file():
    tree = parse_diff(SCENARIO_A)
    tree.files[0].collapsed = True
    assert layout(tree, S).content_height == S.file_header_height + S.file_margin

def test_collapsed_hunk_keeps_header_and_margin():
    tree = parse_diff(SCENARIO_A)
    tree.files[0].hunks[0].collapsed = True
    assert content_height(tree, S) == 36 + 36 + 5 + 10

def test_empty_tree_has_zero_height():
    assert content_height(None, S) == 0
    assert layout(None, S).extents == {}

def test_bands_are_contiguous_and_end_at_content_height():
    tree = parse_diff(TWO_FILES)
    cursor = 0.0
    for band in iter_bands(tree, S):
        assert band.top == cursor
        cursor = band.bottom
    assert cursor == layout(tree, S).content_height

def test_geometry_consistency_for_every_collapse_assignment():
    tree = parse_diff(TWO_FILES)
    nodes = list(tree.files) + [h for f in tree.files for h in f.hunks]
    for flags in itertools.product([False, True], repeat=len(nodes)):
        for node, flag in zip(nodes, flags):
            node.collapsed = flag
        walked = 0.0
        for band in iter_bands(tree, S):
            walked = band.bottom
        expected = 0.0
        for f in tree.files:
            expected += S.file_header_height
            if not f.collapsed:
                for h in f.hunks:
                    expected += S.hunk_header_height
                    if not h.collapsed:
                        expected += len(h.lines) * S.line_height
                    expected += S.hunk_margin
            expected += S.file_margin
        assert layout(tree, S).content_height == walked == expected

def test_extents_per_node():
    tree = parse_diff(TWO_FILES)
    ext = layout(tree, S).extents
    # a.py: header [0,36), hunk 0 [36, 36+36+72), marge 5, hunk 1 [149, 149+36+72)
    assert (ext[(0, 0)].top, ext[(0, 0)].bottom) == (36, 144)
    assert (ext[(0, 1)].top, ext[(0, 1)].bottom) == (149, 257)
    assert (ext[(0,)].top, ext[(0,)].bottom) == (0, 262)
    # b.py commence après la marge de fichier
    assert ext[(1,)].top == 272
    # c.bin: en-tête seul
    assert ext[(2,)].height == S.file_header_height

def test_children_of_collapsed_nodes_not_walked():
    tree = parse_diff(TWO_FILES)
    tree.files[0].collapsed = True
    kinds = [(b.kind, b.file_index) for b in iter_bands(tree, S)]
    assert (BandKind.HUNK_HEADER, 0) not in kinds
    assert (BandKind.HUNK_HEADER, 1) in kinds

def test_custom_style_constants():
    st = Style(file_header_height=50, hunk_header_height=40, line_height=20, file_margin=0, hunk_margin=0)
    tree = parse_diff(SCENARIO_A)
    assert content_height(tree, st) == 50 + 40 + 60
