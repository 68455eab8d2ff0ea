# core/utils.py
import flet as ft
from typing import Optional

TOAST_COLORS = {
    "success": ft.Colors.GREEN,
    "error": ft.Colors.RED_700,
    "info": ft.Colors.BLUE_GREY_700,
    "ready": "#FF6B35",
}

# Short chime played when an order becomes ready
READY_CHIME = "https://actions.google.com/sounds/v1/alarms/beep_short.ogg"

def show_toast(page: ft.Page, message: str, kind: str = "success", duration: int = 3000):
    """Non-blocking notification at the bottom of the page."""
    page.open(ft.SnackBar(
        ft.Text(message, color="white"),
        bgcolor=TOAST_COLORS.get(kind, TOAST_COLORS["info"]),
        duration=duration,
    ))
    page.update()

def make_sound_player(page: ft.Page, src: str = READY_CHIME):
    """Return a callable that plays the chime; failures are left to the caller."""
    audio: Optional[ft.Control] = None

    def play():
        nonlocal audio
        if audio is None:
            audio = ft.Audio(src=src, autoplay=False, volume=0.5)
            page.overlay.append(audio)
            page.update()
        audio.play()

    return play

def status_color(status: str) -> str:
    return {
        "pending": "red",
        "cooking": "orange",
        "ready": "green",
        "completed": "grey",
    }.get(status, "grey")

