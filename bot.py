"""
bot.py — Telegram bot handlers.

All visual formatting is delegated to style.py.
Session state is kept in-memory per user_id as an immutable AppState; handlers
only ever replace it through app_state transitions.
"""
from __future__ import annotations

import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

import app_state
import catalog_store
import config
import pipeline
import style
from app_state import AppState, UploadedImage
from errors import CatalogError, CatalogUnavailable
from image_analyzer import SUPPORTED_MIME_TYPES, detect_mime_type

logger = logging.getLogger(__name__)

# ── Callback data ──────────────────────────────────────────────────────────────
CB_FIND  = "find"
CB_RESET = "reset"


# ── Session ────────────────────────────────────────────────────────────────────

_sessions = pipeline.SessionStore(lambda: app_state.initial(catalog_store.is_configured()))


async def _load_catalog(user_id: int, force: bool = False) -> AppState:
    """Bring the user's catalog in line with the shared snapshot, fetching if needed."""
    state = _sessions.get(user_id)
    if not catalog_store.is_configured():
        logger.warning("API endpoint not configured. Please add your MockAPI URL.")
        return _sessions.put(user_id, app_state.catalog_loaded(state, ()))

    products = catalog_store.snapshot()
    if force or not products:
        try:
            products = await catalog_store.fetch_catalog()
        except CatalogUnavailable as exc:
            return _sessions.put(user_id, app_state.catalog_failed(_sessions.get(user_id), exc))
    return _sessions.put(user_id, app_state.catalog_loaded(_sessions.get(user_id), products))


def parse_add_product_args(text: str) -> tuple[str, str, str, str, str]:
    """
    'Name | image | link | main colors | side colors' → 5-tuple.
    Color fields are optional. Raises ValueError when a required field is blank.
    """
    parts = [p.strip() for p in (text or "").split("|")]
    parts += [""] * (5 - len(parts))
    name, image_src, link, main_colors, side_colors = parts[:5]
    if not (name and image_src and link):
        raise ValueError("name, image URL and link are required")
    return name, image_src, link, main_colors, side_colors


# ── Keyboards ──────────────────────────────────────────────────────────────────

def image_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [InlineKeyboardButton("🔎  Find matches", callback_data=CB_FIND)],
        [InlineKeyboardButton("↺  Start over", callback_data=CB_RESET)],
    ])


def results_keyboard(state: AppState) -> InlineKeyboardMarkup:
    """One 'Visit link' button per shown product, then start-over."""
    rows = [
        [InlineKeyboardButton(f"🛒  #{i}  Visit link", url=product.link)]
        for i, product in enumerate(state.matches[: config.MAX_RESULTS_SHOWN], 1)
        if product.link.startswith(("http://", "https://"))
    ]
    rows.append([InlineKeyboardButton("↺  Start over", callback_data=CB_RESET)])
    return InlineKeyboardMarkup(rows)


def retry_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [InlineKeyboardButton("🔁  Try again", callback_data=CB_FIND)],
        [InlineKeyboardButton("↺  Start over", callback_data=CB_RESET)],
    ])


# ── Handlers ───────────────────────────────────────────────────────────────────

async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(style.welcome(), parse_mode="MarkdownV2")

    state = await _load_catalog(update.effective_user.id)
    if not state.catalog_configured:
        await update.message.reply_text(style.config_needed(), parse_mode="MarkdownV2")
    elif state.error == CatalogUnavailable.code:
        await update.message.reply_text(style.error_card(state.error), parse_mode="MarkdownV2")


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(style.help_text(), parse_mode="MarkdownV2")


async def cmd_catalog(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not catalog_store.is_configured():
        await update.message.reply_text(style.config_needed(), parse_mode="MarkdownV2")
        return
    msg = await update.message.reply_text(style.loading_catalog())
    state = await _load_catalog(update.effective_user.id, force=True)
    if state.error == CatalogUnavailable.code:
        await msg.edit_text(style.error_card(state.error), parse_mode="MarkdownV2")
        return
    await msg.edit_text(style.catalog_status(len(state.catalog)), parse_mode="MarkdownV2")


async def cmd_reset(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id = update.effective_user.id
    _sessions.put(user_id, app_state.reset(_sessions.get(user_id)))
    await update.message.reply_text(style.not_a_photo(), parse_mode="MarkdownV2")


async def cmd_addproduct(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id = update.effective_user.id
    if user_id not in config.ADMIN_IDS:
        await update.message.reply_text(style.not_authorized(), parse_mode="MarkdownV2")
        return
    if not catalog_store.is_configured():
        await update.message.reply_text(style.config_needed(), parse_mode="MarkdownV2")
        return

    try:
        fields = parse_add_product_args(" ".join(context.args or []))
    except ValueError:
        await update.message.reply_text(style.add_product_usage(), parse_mode="MarkdownV2")
        return

    state = _sessions.get(user_id)
    if state.is_submitting:
        return
    _sessions.put(user_id, app_state.submit_started(state))

    try:
        products = await catalog_store.add_product(*fields)
    except CatalogError as exc:
        logger.error("Failed to submit product: %s", exc)
        state = _sessions.put(user_id, app_state.submit_failed(_sessions.get(user_id), exc))
        await update.message.reply_text(style.error_card(state.error), parse_mode="MarkdownV2")
        return

    _sessions.put(user_id, app_state.submit_succeeded(_sessions.get(user_id), products))
    await update.message.reply_text(style.product_added(fields[0], len(products)), parse_mode="MarkdownV2")


async def handle_photo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id = update.effective_user.id
    message = update.message

    if message.photo:
        tg_file = await context.bot.get_file(message.photo[-1].file_id)
        mime_type = None
    else:
        tg_file = await context.bot.get_file(message.document.file_id)
        mime_type = message.document.mime_type

    image_bytes = bytes(await tg_file.download_as_bytearray())
    mime_type = mime_type or detect_mime_type(image_bytes)
    if not image_bytes or mime_type not in SUPPORTED_MIME_TYPES:
        await message.reply_text(style.not_a_photo(), parse_mode="MarkdownV2")
        return

    # Reset first, then attach the new image
    _sessions.put(user_id, app_state.image_selected(
        _sessions.get(user_id), UploadedImage(data=image_bytes, mime_type=mime_type),
    ))
    state = await _load_catalog(user_id)

    if not state.catalog_configured:
        await message.reply_text(style.config_needed(), parse_mode="MarkdownV2")
        return
    if state.error:
        # Analysis still runs against an empty catalog
        await message.reply_text(
            style.error_card(state.error),
            parse_mode="MarkdownV2",
            reply_markup=image_keyboard(),
        )
        return

    await message.reply_text(
        style.image_received(),
        parse_mode="MarkdownV2",
        reply_markup=image_keyboard(),
    )


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query   = update.callback_query
    user_id = update.effective_user.id
    state   = _sessions.get(user_id)
    data    = query.data

    if data == CB_RESET:
        await query.answer()
        _sessions.put(user_id, app_state.reset(state))
        await query.edit_message_text(style.not_a_photo(), parse_mode="MarkdownV2")
        return

    if data == CB_FIND:
        if state.is_analyzing:
            await query.answer("Still analysing…")
            return
        await query.answer()
        if state.image is None:
            await query.edit_message_text(style.no_image(), parse_mode="MarkdownV2")
            return

        await query.edit_message_text(style.loading_analysis(), parse_mode="MarkdownV2")
        try:
            state = await pipeline.find_matches(_sessions, user_id)
        except ValueError:
            # Reset landed while the loading text was being sent
            await query.edit_message_text(style.no_image(), parse_mode="MarkdownV2")
            return

        if state.error:
            await query.edit_message_text(
                style.error_card(state.error),
                parse_mode="MarkdownV2",
                reply_markup=retry_keyboard() if state.image else None,
            )
        elif app_state.is_analysis_complete(state):
            await query.edit_message_text(
                style.results_card(state, config.MAX_RESULTS_SHOWN),
                parse_mode="MarkdownV2",
                reply_markup=results_keyboard(state),
                disable_web_page_preview=True,
            )
        # Otherwise the result was stale (user reset mid-run): nothing to show
        return

    await query.answer()


async def handle_non_photo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(style.not_a_photo(), parse_mode="MarkdownV2")


# ── App factory ────────────────────────────────────────────────────────────────

def build_application() -> Application:
    app = Application.builder().token(config.TELEGRAM_BOT_TOKEN).build()

    app.add_handler(CommandHandler("start",      cmd_start))
    app.add_handler(CommandHandler("help",       cmd_help))
    app.add_handler(CommandHandler("catalog",    cmd_catalog))
    app.add_handler(CommandHandler("reset",      cmd_reset))
    app.add_handler(CommandHandler("addproduct", cmd_addproduct))
    app.add_handler(MessageHandler(filters.PHOTO | filters.Document.IMAGE, handle_photo))
    app.add_handler(CallbackQueryHandler(handle_callback))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_non_photo))
    return app
