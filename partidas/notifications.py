from html import escape
from typing import Any, List, NamedTuple

FOOTER = "Este correo fue generado automáticamente."


class ComposedMessage(NamedTuple):
    text: str
    html: str


def _html_body(logo_url: str, reference_url: str, content: str) -> str:
    return f"""
            <div style="padding: 1rem; text-align: center;">
                <img src="{escape(logo_url)}" style="width: 100%; padding: 1rem;" alt="Logo">
                {content}
                <hr>
                <p>Puedes utilizar esta información para realizar consultas adicionales <a href="{escape(reference_url)}">haciendo clic acá.</a></p>
                <p style="margin-top: 1rem; font-size: 0.8rem; font-style: italic;">{FOOTER}</p>
            </div>
        """


def _unit_field(unit: Any, name: str) -> str:
    value = unit.get(name) if isinstance(unit, dict) else getattr(unit, name, None)
    return "" if value is None else str(value)


def compose(data: Any, logo_url: str = "", reference_url: str = "") -> ComposedMessage:
    """
    Build the plain text and HTML bodies of the partida email.

    Args:
        data: A list of functional units (horizontal property) or a single partida
        logo_url: Image shown at the top of the HTML version
        reference_url: Link for further queries

    Returns:
        ComposedMessage with ``text`` and ``html``
    """
    if isinstance(data, list):
        units: List[tuple] = [
            (_unit_field(u, "pdahorizontal"), _unit_field(u, "piso"), _unit_field(u, "dpto"))
            for u in data
        ]
        formatted = "\n".join(
            f"Partida: {partida}, Piso: {piso}, Dpto: {dpto}" for partida, piso, dpto in units
        )
        formatted_html = "".join(
            f"<li>Partida: <b>{escape(partida)}</b>, Piso: <b>{escape(piso)}</b>, "
            f"Dpto: <b>{escape(dpto)}</b></li>"
            for partida, piso, dpto in units
        )
        text = f"Los números de partida son:\n{formatted}\n\n{FOOTER}"
        content = (
            "<p>Los números de partida son:</p>\n"
            f'                <ul style="text-align: left; padding-left: 2rem;">{formatted_html}</ul>'
        )
    else:
        text = f"El número de partida es:\n{data}\n\n{FOOTER}"
        content = f"<p>El número de partida es:<br><b>{escape(str(data))}</b></p>"

    return ComposedMessage(text=text, html=_html_body(logo_url, reference_url, content))
