from see_code.diff.parser import parse_diff
from see_code.view.layout import Style
from see_code.view.render import Viewport, visible_nodes, PLACEHOLDER_TEXT

SCENARIO_A = b"diff --git a/foo.c b/foo.c\n@@ -1,2 +1,2 @@\n-old\n+new\n context\n"
S = Style()

def test_empty_tree_renders_placeholder():
    for tree in (None, parse_diff(b"just some text\n")):
        nodes = visible_nodes(tree, S, 0, Viewport(1080, 2400))
        assert len(nodes) == 1
        assert nodes[0].kind == "placeholder"
        assert nodes[0].text == PLACEHOLDER_TEXT

def test_full_tree_nodes_and_indent():
    nodes = visible_nodes(parse_diff(SCENARIO_A), S, 0, Viewport(1080, 2400))
    assert [n.kind for n in nodes] == ["file_header", "hunk_header", "line", "line", "line"]
    assert nodes[0].text == "▾ foo.c"
    assert nodes[1].text == "▾ @@ -1,2 +1,2 @@"
    assert [n.text for n in nodes[2:]] == ["-old", "+new", " context"]
    assert [n.rect.x for n in nodes] == [0, S.indent, 2 * S.indent, 2 * S.indent, 2 * S.indent]
    assert [n.rect.y for n in nodes] == [0, 36, 72, 108, 144]
    assert nodes[2].style.foreground == S.colors["removed"]
    assert nodes[3].style.foreground == S.colors["added"]

def test_window_is_offset_by_scroll_and_clipped():
    nodes = visible_nodes(parse_diff(SCENARIO_A), S, 80, Viewport(1080, 40))
    # fenêtre [80, 120): deux lignes, la première partiellement visible
    assert [n.text for n in nodes] == ["-old", "+new"]
    assert nodes[0].rect.y == 72 - 80

def test_collapsed_markers():
    tree = parse_diff(SCENARIO_A)
    tree.files[0].collapsed = True
    nodes = visible_nodes(tree, S, 0, Viewport(1080, 2400))
    assert [n.text for n in nodes] == ["▸ foo.c"]

def test_to_dict_is_plain_data():
    d = visible_nodes(parse_diff(SCENARIO_A), S, 0, Viewport(1080, 2400))[0].to_dict()
    assert d["rect"] == {"x": 0.0, "y": 0.0, "width": 1080.0, "height": 36.0}
    assert d["kind"] == "file_header"
