import numpy as np
from ui.renderer import Renderer

def test_renderer_initialization():
    r = Renderer(width=60, height=40, title="GeoCoin Test")
    assert r.width == 60
    assert r.height == 40
    assert r.title == "GeoCoin Test"
    assert r.root_console.width == 60
    assert r.root_console.height == 40
    assert r.context is None

def test_renderer_default_title():
    assert Renderer(width=10, height=10).title == "GeoCoin"

def test_renderer_clear():
    r = Renderer(width=60, height=40)
    r.root_console.print(0, 0, "$")
    assert chr(r.root_console.ch[0, 0]) == "$"

    r.clear()
    assert chr(r.root_console.ch[0, 0]) == " "

def test_map_area_excludes_hud_lines():
    r = Renderer(width=40, height=25, hud_lines=5)
    assert r.map_height == 20
    assert r.in_map(39, 19)
    assert not r.in_map(0, 20)
    assert not r.in_map(-1, 0)

def test_put_ignores_off_map_positions():
    r = Renderer(width=40, height=25)
    r.put(3, 4, "$", fg=(255, 215, 0))
    r.put(3, 22, "$", fg=(255, 215, 0))
    r.put(40, 0, "$", fg=(255, 215, 0))
    assert chr(r.root_console.ch[4, 3]) == "$"
    assert chr(r.root_console.ch[22, 3]) == " "

def test_print_line_clips_to_width():
    r = Renderer(width=10, height=6)
    r.print_line(6, 0, "abcdefgh", fg=(255, 255, 255))
    assert "".join(chr(c) for c in r.root_console.ch[0, 6:]) == "abcd"

def test_shade_map_only_touches_map_rows():
    r = Renderer(width=4, height=6, hud_lines=2)
    mask = np.zeros((4, 4), dtype=bool)
    mask[1, 2] = True
    r.shade_map(mask, (16, 16, 24))
    assert tuple(r.root_console.rgb["bg"][1, 2]) == (16, 16, 24)
    assert tuple(r.root_console.rgb["bg"][1, 1]) == (0, 0, 0)
