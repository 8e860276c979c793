"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palette (industrial slate with a blue accent)
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register it in the app.
"""

from textual.theme import Theme

# Slate dashboard palette: dark sidebar tones with blue highlights
INDUSTRIAL_SLATE = Theme(
    name="industrial-slate",
    primary="#3b82f6",      # Blue 500 - main accent
    secondary="#6366f1",    # Indigo 500 - analysis cards
    accent="#60a5fa",       # Blue 400 - highlights
    foreground="#e2e8f0",   # Slate 200
    background="#020617",   # Slate 950
    success="#10b981",      # Emerald 500 - conclusion cards
    warning="#f59e0b",      # Amber 500 - risk cards
    error="#ef4444",        # Red 500
    surface="#0f172a",      # Slate 900
    panel="#1e293b",        # Slate 800
    dark=True,
    variables={
        "block-cursor-foreground": "#020617",
        "block-cursor-background": "#93c5fd",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#334155 20%",

        "input-cursor-background": "#e2e8f0",
        "input-cursor-foreground": "#020617",
        "input-selection-background": "#3b82f6 30%",

        "border": "#334155",
        "border-blurred": "#1e293b",

        "scrollbar": "#334155",
        "scrollbar-hover": "#475569",
        "scrollbar-active": "#3b82f6",
        "scrollbar-background": "#0f172a",
        "scrollbar-corner-color": "#0f172a",

        "footer-foreground": "#cbd5e1",
        "footer-background": "#020617",
        "footer-key-foreground": "#60a5fa",
        "footer-key-background": "#1e293b",
        "footer-description-foreground": "#94a3b8",

        "text-muted": "#64748b",
        "text-disabled": "#334155",

        "link-color": "#60a5fa",
        "link-style": "underline",
        "link-color-hover": "#93c5fd",
        "link-style-hover": "bold underline",
    },
)
