# garbler_app.py
# Garbler: Gradio UI (garble / degarble / checked modes)
# Author: garbler maintainers
# Project: garbler (see pyproject.toml)

import logging

import gradio as gr
import garbler as gb

logger = logging.getLogger(__name__)


CSS = """
<style>
#title { margin-bottom: 0.25rem; }
.small { opacity: 0.90; font-size: 0.92rem; }
</style>
"""

ABOUT_MD = r"""
## About Garbler

Garbling shuffles the characters of a text with a keyed Fisher-Yates pass and
XORs each one with a keyed mask. Degarbling with the **same key** replays the
same decisions backward and restores the text exactly.

- The mask never flips bit `0x20`, so letter case and spaces keep their shape.
- **Rounds > 1** expands the key text into a key array and garbles once per key.
- A **numeric key** (decimal or `0x…` hex) overrides the key text. It is the
  value "Derive key" shows, and can be stored instead of the key text.

**Modes:**
- `GARBLE`: plain garbling. A wrong key silently gives wrong text.
- `GARBLE-CHK`: appends a 4-char check before garbling; decode reports OK/FAILED.

This is obfuscation, **not encryption**.
"""

MODES = ["GARBLE", "GARBLE-CHK"]


def resolve_key(key_text: str, numeric_key: str, rounds: int):
    numeric_key = (numeric_key or "").strip()
    if numeric_key:
        return int(numeric_key, 0)

    rounds = max(1, int(rounds or 1))
    if rounds == 1:
        return key_text or gb.DEFAULT_KEY_TEXT
    return gb.make_key_array(rounds, key_text or gb.DEFAULT_KEY_TEXT)


SURROGATE_ERROR = "Error: output contains surrogate code points and cannot be displayed; use the library API"


def displayable(out: str, status: str):
    # garbled text can hold lone surrogates, which the browser JSON cannot carry
    try:
        out.encode("utf-8")
    except UnicodeEncodeError:
        return "", SURROGATE_ERROR
    return out, status


def do_garble(mode: str, text_in: str, key_text: str, numeric_key: str, rounds: int):
    try:
        key = resolve_key(key_text, numeric_key, rounds)

        if mode == "GARBLE":
            return displayable(gb.garble(text_in or "", key), "Garbled. (No verification)")

        if mode == "GARBLE-CHK":
            return displayable(gb.garble_checked(text_in or "", key), "Garbled (with check chars).")

        return "", f"Error: Unknown mode {mode!r}"

    except Exception as e:
        logger.warning("garble failed: %s", e)
        return "", f"Error: {e}"


def do_degarble(mode: str, text_in: str, key_text: str, numeric_key: str, rounds: int):
    try:
        key = resolve_key(key_text, numeric_key, rounds)

        if mode == "GARBLE":
            return displayable(gb.degarble(text_in or "", key), "Degarbled. (No verification in GARBLE)")

        if mode == "GARBLE-CHK":
            r = gb.degarble_checked(text_in or "", key)
            return displayable(r.value, f"Degarbled. Verified: {'OK' if r.ok else 'FAILED'}")

        return "", f"Error: Unknown mode {mode!r}"

    except Exception as e:
        logger.warning("degarble failed: %s", e)
        return "", f"Error: {e}"


def do_swap(text_in: str, text_out: str):
    return text_out, text_in, "Swapped."


def do_derive_key(key_text: str):
    try:
        k = gb.derive_key(key_text or gb.DEFAULT_KEY_TEXT)
        return f"0x{k:016X}", "Derived numeric key from key text."
    except Exception as e:
        return "", f"Error: {e}"


def build_app():
    with gr.Blocks(title="Garbler: Gradio Demo") as demo:
        gr.HTML(CSS)

        gr.Markdown("# Garbler: Offline Demo", elem_id="title")
        gr.Markdown(
            "**Garbler** is a keyed, reversible shuffle-and-perturb transform. "
            "Output has the same length as the input and looks like gibberish.",
            elem_classes=["small"],
        )

        with gr.Tabs():
            with gr.TabItem("Demo"):
                with gr.Row():
                    mode = gr.Dropdown(choices=MODES, value="GARBLE", label="Mode")
                    rounds = gr.Number(value=1, precision=0, minimum=1, label="Rounds (key array size)")

                text_in = gr.Textbox(
                    label="Input (plaintext or garbled)",
                    lines=4,
                    value="Testing Garbler with mixed content. Done!",
                )

                with gr.Row():
                    key_text = gr.Textbox(label="Key text", value=gb.DEFAULT_KEY_TEXT)
                    numeric_key = gr.Textbox(label="Numeric key (optional, overrides key text)", value="")

                with gr.Row():
                    btn_enc = gr.Button("Garble")
                    btn_dec = gr.Button("Degarble")
                    btn_swap = gr.Button("Swap ↔")
                    btn_key = gr.Button("Derive key")

                text_out = gr.Textbox(label="Output", lines=4)
                status = gr.Markdown("Tip: Garble writes to Output. Degarble reads from Input. GARBLE-CHK can detect a wrong key.")

                btn_enc.click(
                    do_garble,
                    inputs=[mode, text_in, key_text, numeric_key, rounds],
                    outputs=[text_out, status],
                )
                btn_dec.click(
                    do_degarble,
                    inputs=[mode, text_in, key_text, numeric_key, rounds],
                    outputs=[text_out, status],
                )
                btn_swap.click(
                    do_swap,
                    inputs=[text_in, text_out],
                    outputs=[text_in, text_out, status],
                )
                btn_key.click(
                    do_derive_key,
                    inputs=[key_text],
                    outputs=[numeric_key, status],
                )

            with gr.TabItem("About"):
                gr.Markdown(ABOUT_MD)

    return demo


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = build_app()
    app.launch()
