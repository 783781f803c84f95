"""
Confirmation messages shown after a guest accepts
"""


def generar_mensaje_confirmacion(name: str, pases: int) -> str:
    """Build the confirmation message for a master list entry.

    One pass reads in the singular ("lugar", "ti"); anything else reads in
    the plural ("lugares", "ustedes").
    """
    if pases == 1:
        return f"¡Hola {name}! Tenemos 1 lugar reservado para ti. ¡Te esperamos!"
    return f"¡Hola {name}! Tenemos {pases} lugares reservados para ustedes. ¡Los esperamos!"
