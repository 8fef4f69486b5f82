"""
style.py — visual style for the bot.

Design language:
  • Structured cards with consistent emoji icons
  • Unicode box-drawing dividers
  • Clear visual hierarchy: header → body → footer
  • MarkdownV2 throughout

All text that goes into Telegram messages should be formatted through this module.
"""
from __future__ import annotations
from typing import Optional

import errors

# ── Escape ────────────────────────────────────────────────────────────────────

def esc(text: str) -> str:
    """Escape all MarkdownV2 special characters."""
    for ch in r"\_*[]()~`>#+-=|{}.!":
        text = text.replace(ch, f"\\{ch}")
    return text


# ── Visual constants ──────────────────────────────────────────────────────────

DIV   = "━━━━━━━━━━━━━━━━━━━━━━━━━━"    # thick divider
SDIV  = "┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄"    # subtle divider

MAX_MESSAGE_LEN = 4050


def color_chips(colors) -> str:
    """['Black', 'white'] → '`Black` · `white`'"""
    return " · ".join(f"`{esc(c)}`" for c in colors)


# ══════════════════════════════════════════════════════════════════════════════
# START / HELP
# ══════════════════════════════════════════════════════════════════════════════

def welcome() -> str:
    return (
        f"👟 *FIND YOUR STYLE MATCH*\n"
        f"{DIV}\n\n"
        f"Send a photo of your shoes\\. Our AI will read their colors\n"
        f"and find matching products from our catalog\\.\n\n"
        f"{DIV}\n"
        f"_📸 Just send a photo to get started_"
    )


def help_text() -> str:
    return (
        f"📖 *HOW TO USE*\n"
        f"{DIV}\n\n"
        f"*1️⃣  Send a photo of a shoe*\n"
        f"_One shoe, well\\-lit, filling the frame_\n\n"
        f"*2️⃣  Tap Find matches*\n"
        f"_AI detects main colors \\(≥10% of the shoe\\) and side colors_\n\n"
        f"*3️⃣  Browse matching products*\n"
        f"_Tap a button to open the store page_\n\n"
        f"{DIV}\n"
        f"🎯  *How matching works*\n"
        f"▸ 3\\+ colors detected → products sharing at least 3 of them\n"
        f"▸ 1–2 colors detected → products carrying all of them\n\n"
        f"{DIV}\n"
        f"_Commands: /start · /help · /catalog · /reset · /addproduct_"
    )


# ══════════════════════════════════════════════════════════════════════════════
# PHOTO FLOW
# ══════════════════════════════════════════════════════════════════════════════

def image_received() -> str:
    return (
        f"📸 *Photo received*\n"
        f"{SDIV}\n"
        f"Tap *Find matches* to analyse the shoe colors\\."
    )


def loading_analysis() -> str:
    return (
        f"🔍 *Analysing your photo*\n"
        f"{SDIV}\n"
        f"⠋ Analyzing image…"
    )


def loading_catalog() -> str:
    return "⠋ Loading product catalog…"


def esc_url(url: str) -> str:
    """Escape a URL for the (...) part of a MarkdownV2 inline link."""
    return url.replace("\\", "\\\\").replace(")", "\\)")


def product_card(product, index: int) -> str:
    """Format a single catalog product as a card."""
    lines = [f"*{index}\\.*  {esc(product.name[:100] or 'Unnamed product')}"]
    if product.color_tags:
        lines.append(f"🎨 {color_chips(product.color_tags)}")
    if product.image_src.startswith(("http://", "https://")):
        lines.append(f"🖼️ [Product image]({esc_url(product.image_src)})")
    return "\n".join(lines)


def _results_footer(total: int, shown: int) -> str:
    footer = f"\n{SDIV}\n_🛍️ {total} matching products"
    if total > shown:
        footer += f", showing first {shown}"
    return footer + "_"


def results_card(state, max_shown: int) -> str:
    """Analysis result: detected colors, then the matching products."""
    analysis = state.analysis
    color_lines = []
    if analysis.main_colors:
        color_lines.append(f"*Main Colors:* {color_chips(analysis.main_colors)}")
    if analysis.side_colors:
        color_lines.append(f"*Side Colors:* {color_chips(analysis.side_colors)}")

    header = (
        f"✨ *ANALYSIS COMPLETE*\n"
        f"{DIV}\n"
        + "\n".join(color_lines)
        + f"\n{SDIV}\n"
    )

    if not state.matches:
        return header + "😔 _No matching products found for the detected colors\\. Try another image\\!_"

    total = len(state.matches)
    cards = [product_card(p, i) for i, p in enumerate(state.matches[:max_shown], 1)]

    # Drop whole cards until the message fits
    while len(cards) > 1:
        full = header + "\n\n".join(cards) + _results_footer(total, len(cards))
        if len(full) <= MAX_MESSAGE_LEN:
            return full
        cards.pop()
    return header + "\n\n".join(cards) + _results_footer(total, len(cards))


# ══════════════════════════════════════════════════════════════════════════════
# CATALOG
# ══════════════════════════════════════════════════════════════════════════════

def catalog_status(count: int) -> str:
    return (
        f"🗂️ *Product catalog*\n"
        f"{SDIV}\n"
        f"{count} products loaded\\."
    )


def add_product_usage() -> str:
    return (
        f"➕ *Add a product*\n"
        f"{SDIV}\n"
        f"`/addproduct Name | Image URL | Store link | main colors | side colors`\n\n"
        f"_Name, image URL and link are required\\. Colors are comma\\-separated\\._"
    )


def product_added(name: str, count: int) -> str:
    return (
        f"✅ *Product saved*\n"
        f"{SDIV}\n"
        f"{esc(name)} was added\\. The catalog now has {count} products\\."
    )


def config_needed() -> str:
    return (
        f"⚠️ *Action Required: Configure Your API*\n"
        f"{DIV}\n\n"
        f"This bot needs a cloud backend to store and retrieve products\\.\n\n"
        f"▸ Create a free account at mockapi\\.io\n"
        f"▸ Create a project, then a resource named `products`\n"
        f"▸ Put the endpoint URL in `CATALOG_ENDPOINT` in `\\.env`\n"
    )


# ══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGES
# ══════════════════════════════════════════════════════════════════════════════

def error_card(code: Optional[str]) -> str:
    """One card per error code; the text comes from errors.py."""
    return (
        f"❌ *Something went wrong*\n"
        f"{SDIV}\n"
        f"{esc(errors.message_for(code or ''))}"
    )


def no_image() -> str:
    return "📸 Please send a photo of a shoe first\\."


def not_a_photo() -> str:
    return (
        f"📸 *Send a Photo*\n"
        f"{SDIV}\n"
        f"I need a shoe photo to find matching products\\.\n"
        f"_Just take a pic and send it here\\!_"
    )


def not_authorized() -> str:
    return "🔒 Only admins can add products\\."
