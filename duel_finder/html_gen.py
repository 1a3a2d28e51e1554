"""HTML rendering of the duel finder panel and its results."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from duel_finder import DuelQueryResult, GameConfig, MatchSummary, ParsedDuel

if TYPE_CHECKING:
    from duel_finder.panel import PanelState


def match_label(match: MatchSummary, day: int | None) -> str:
    """Time only when a single day was searched, full date otherwise."""
    return match.date[11:] if day else match.date


def render_match(match: MatchSummary, day: int | None) -> str:
    return (
        f'<li style="padding:0.1em 0.2em">{escape(match_label(match, day))}: '
        f'<a class="bga-link" href="{escape(match.url)}">{escape(match.scores)}</a>'
        f"{escape(match.flags)}</li>"
    )


def render_results(results: list[tuple[ParsedDuel, DuelQueryResult]], day: int | None) -> str:
    """Render one header and ordered match list per duel."""
    parts: list[str] = []
    for duel, result in results:
        parts.append(
            f'<h3><a style="text-decoration:none" href="{escape(result.players_url)}">'
            f"{escape(duel.label)}</a></h3>"
        )
        items = "".join(render_match(m, day) for m in result.tables)
        parts.append(f"<ol>{items}</ol>")
    return f'<div id="finderDuelList" class="duel-list">{"".join(parts)}</div>'


def _game_options(games: list[GameConfig], selected: int) -> str:
    options = []
    for game in games:
        attr = " selected" if game.id == selected else ""
        options.append(f'<option value="{game.id}"{attr}>{escape(game.name)}</option>')
    return "".join(options)


def generate_panel_html(state: PanelState, games: list[GameConfig]) -> str:
    """Generate a standalone page holding the finder panel in its current state."""
    showing_results = state.mode == "results"
    disabled = " disabled" if state.busy else ""
    panel_style = "" if state.visible else ' style="display:none"'

    if showing_results:
        body = render_results(state.results, state.day)
        find_style, back_style = ' style="display:none"', ""
    else:
        body = (
            '<label for="finderDuelListTxt">Duel list: </label>'
            f'<textarea id="finderDuelListTxt"{disabled}>{escape(state.text)}</textarea>'
        )
        find_style, back_style = "", ' style="display:none"'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>BGA Duel Finder</title>
    <style>
        #bgaDuelFinderUi {{
            position: fixed;
            left: 0;
            top: 0;
            margin: 1em;
            width: 300px;
            height: 600px;
            padding: 15px;
            background-color: #eeefef;
            border: 2px solid black;
            box-shadow: 7px 7px #444;
            z-index: 1000;
            color: black;
        }}
        #finderDuelListTxt {{ display: block; width: 100%; height: 75%; }}
        .duel-list {{ height: 460px; overflow-y: auto; }}
        .bgabutton {{ position: absolute; bottom: 0; }}
        .bgabutton_blue {{ right: 15px; }}
        .bgabutton_red {{ left: 15px; }}
    </style>
</head>
<body>
    <div id="bgaDuelFinderUi"{panel_style}>
        <h2>BGA Duel Finder</h2>
        <label for="finderGamePicker">Game: </label>
        <select id="finderGamePicker"{disabled}>{_game_options(games, state.game_id)}</select>
        <br>
        <label for="finderDatePicker">Duels date: </label>
        <input id="finderDatePicker" type="date" value="{escape(state.date)}"{disabled}>
        <br>
        {body}
        <a id="finderFindBtn" class="bgabutton bgabutton_blue"{find_style}>Find Duels</a>
        <a id="finderBackBtn" class="bgabutton bgabutton_blue"{back_style}>Back</a>
        <a id="finderCloseBtn" class="bgabutton bgabutton_red">Close</a>
    </div>
</body>
</html>"""
