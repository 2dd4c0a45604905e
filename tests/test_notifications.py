"""
Tests for the partida email bodies.
"""

from partidas.models import PropertyUnit
from partidas.notifications import FOOTER, compose

LOGO = "https://example.com/logo.png"
REFERENCE = "https://example.com/abl"


def test_scalar_partida():
    message = compose("456", LOGO, REFERENCE)

    assert message.text == f"El número de partida es:\n456\n\n{FOOTER}"
    assert "<b>456</b>" in message.html
    assert f'src="{LOGO}"' in message.html
    assert f'href="{REFERENCE}"' in message.html


def test_unit_list_enumerates_every_unit():
    units = [
        PropertyUnit(pdahorizontal="123", piso="1", dpto="A"),
        PropertyUnit(pdahorizontal="124", piso="PB", dpto="B"),
    ]

    message = compose(units, LOGO, REFERENCE)

    assert message.text.startswith("Los números de partida son:\n")
    assert "Partida: 123, Piso: 1, Dpto: A\nPartida: 124, Piso: PB, Dpto: B" in message.text
    assert message.html.count("<li>") == 2
    assert "<li>Partida: <b>124</b>, Piso: <b>PB</b>, Dpto: <b>B</b></li>" in message.html


def test_unit_list_accepts_plain_dicts():
    message = compose([{"pdahorizontal": "9", "piso": "3", "dpto": "C"}])

    assert "Partida: 9, Piso: 3, Dpto: C" in message.text


def test_long_values_are_not_truncated():
    partida = "7" * 300

    message = compose(partida)

    assert partida in message.text
    assert partida in message.html


def test_html_escapes_upstream_values():
    message = compose([{"pdahorizontal": "<script>", "piso": "1", "dpto": "A&B"}])

    assert "<script>" not in message.html
    assert "&lt;script&gt;" in message.html
    assert "A&amp;B" in message.html
    assert "Dpto: A&B" in message.text


def test_compose_is_deterministic():
    units = [PropertyUnit(pdahorizontal="123", piso="1", dpto="A")]

    assert compose(units, LOGO, REFERENCE) == compose(units, LOGO, REFERENCE)
    assert compose("456", LOGO, REFERENCE) == compose("456", LOGO, REFERENCE)
