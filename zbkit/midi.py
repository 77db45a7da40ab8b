"""Writing simple melodies as MIDI from a note string, and reading them back.

A melody is a run of notes such as ``CCGGAAGR``. Each note is a letter
``A``-``G``, optionally flattened with ``b`` or sharpened with ``#``, followed by
an optional octave (default 5). ``<n`` scales the length by ``2**n`` quarter
notes, so ``<1`` is a half note and ``<-1`` an eighth. ``R`` is a rest that
delays the next note.
"""

from __future__ import annotations

import io
import math
import re
import subprocess
from pathlib import Path

import mido

TICKS_PER_QUARTER = 960
TEMPO_BPM = 72
VELOCITY = 120
DEFAULT_TIMBRE = 40
INSTRUMENT = "Violin"

NOTE_MAP = {
    "C": 60,
    "Db": 61,
    "D": 62,
    "Eb": 63,
    "E": 64,
    "F": 65,
    "Gb": 66,
    "G": 67,
    "Ab": 68,
    "A": 69,
    "Bb": 70,
    "B": 71,
}
_NAMES = {value % 12: name for name, value in NOTE_MAP.items()}

# One note: any first character, then everything up to the next note letter or rest.
_SEGMENT = re.compile(r".[^A-GR]*", re.S)
_LENGTH = re.compile(r"-?[0-9]+")


class MidiSyntaxError(ValueError):
    """Raised when a note string cannot be turned into MIDI."""


def _is_letter(ch: str) -> bool:
    return "A" <= ch <= "G"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def note_name(n: int) -> str:
    """Name of the pitch class of MIDI note ``n``, e.g. ``C`` or ``Db``."""
    return _NAMES[n % 12]


def octave(base: int, oct: int) -> int:
    """MIDI note of pitch class ``base`` in octave ``oct`` (capped at 10)."""
    base &= 0xFF
    oct &= 0xFF
    if oct > 10:
        oct = 10
    if oct == 0:
        return base
    res = (base + 12 * oct) & 0xFF
    if res > 127:
        res -= 12
    return res


def process_one(note: str) -> int:
    """MIDI note for a single answer such as ``C#6``; other characters are ignored."""
    base = 0
    level = 0
    for ch in note.replace(" ", ""):
        if _is_letter(ch):
            base = NOTE_MAP[ch] % 12
        elif ch == "b":
            base = (base - 1) & 0xFF
        elif ch == "#":
            base = (base + 1) & 0xFF
        elif _is_digit(ch):
            level = (level * 10 + int(ch)) & 0xFF
    return octave(base, level or 5)


def validate_timbre(timbre: int) -> int:
    """Return the instrument number if it lies in 0..127, else raise ValueError."""
    timbre = int(timbre)
    if not 0 <= timbre <= 127:
        raise ValueError("音色应该在0~127之间")
    return timbre


def _ticks(length: int) -> int:
    """Ticks of a note ``2**length`` quarter notes long, as a 32-bit count."""
    if length >= 0:
        return (TICKS_PER_QUARTER << length) & 0xFFFFFFFF if length < 32 else 0
    shift = -length
    if shift >= 32:
        raise MidiSyntaxError(f"音长<{length}超出范围")
    return TICKS_PER_QUARTER >> shift


def _notes(text: str):
    """Yield ``(rest, base, level, length)`` for each note of the string."""
    k = text.replace(" ", "")
    for seg in _SEGMENT.finditer(k):
        chars = seg.group()
        rest = False
        base = 0
        level = 0
        length_chars: list[str] = []
        j = 0
        while j < len(chars):
            ch = chars[j]
            j += 1
            if ch == "R":
                rest = True
            elif _is_letter(ch):
                base = NOTE_MAP[ch] % 12
            elif ch == "b":
                base = (base - 1) & 0xFF
            elif ch == "#":
                base = (base + 1) & 0xFF
            elif _is_digit(ch):
                level = (level * 10 + int(ch)) & 0xFF
            elif ch == "<":
                while j < len(chars) and (chars[j] == "-" or _is_digit(chars[j])):
                    length_chars.append(chars[j])
                    j += 1
            else:
                raise MidiSyntaxError(f"无法解析第{seg.start() + j - 1}个位置的{ch}字符")
        digits = "".join(length_chars)
        length = int(digits) if _LENGTH.fullmatch(digits) else 0
        yield rest, base, level, length


def build_midi(text: str, timbre: int = DEFAULT_TIMBRE) -> mido.MidiFile:
    """Build a one-track MIDI file playing the note string with the given instrument."""
    track = mido.MidiTrack()
    track.append(mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0))
    track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(TEMPO_BPM), time=0))
    track.append(mido.MetaMessage("instrument_name", name=INSTRUMENT, time=0))
    track.append(mido.Message("program_change", channel=0, program=int(timbre) & 0x7F, time=0))

    delay = 0
    for rest, base, level, length in _notes(text):
        if rest:
            delay = _ticks(length)
            continue
        key = octave(base, level or 5) & 0x7F
        track.append(mido.Message("note_on", channel=0, note=key, velocity=VELOCITY, time=delay))
        track.append(mido.Message("note_off", channel=0, note=key, velocity=0, time=_ticks(length)))
        delay = 0
    track.append(mido.MetaMessage("end_of_track", time=0))

    mid = mido.MidiFile(type=1, ticks_per_beat=TICKS_PER_QUARTER)
    mid.tracks.append(track)
    return mid


def make_midi(path, text: str, timbre: int = DEFAULT_TIMBRE) -> Path:
    """Write the note string as a MIDI file, unless ``path`` already exists."""
    path = Path(path)
    if path.exists():
        return path
    build_midi(text, timbre).save(str(path))
    return path


def _round(x: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _power(ticks: float) -> int | None:
    """Nearest power of two of a length in quarter notes, or None for no length."""
    length = ticks / TICKS_PER_QUARTER
    if length <= 0:
        return None
    return _round(math.log2(length))


def midi_to_text(data: bytes, track_no: int) -> str:
    """Describe one track of a MIDI file as a note string; empty if there is no such track."""
    mid = mido.MidiFile(file=io.BytesIO(data))
    if not 0 <= track_no < len(mid.tracks):
        return ""

    parts: list[str] = []
    start = 0.0
    end = 0.0
    start_note = 0
    end_note = 0
    abs_ticks = 0
    for msg in mid.tracks[track_no]:
        abs_ticks += msg.time
        if msg.is_meta:
            continue
        sounding = msg.type == "note_on" and msg.velocity > 0
        if sounding:
            start = float(abs_ticks)
            start_note = msg.note
        if msg.type == "note_off" or (msg.type == "note_on" and msg.velocity == 0):
            end = float(abs_ticks)
            end_note = msg.note
            if start_note == end_note:
                parts.append(note_name(msg.note))
                level = msg.note // 12
                if level != 5:
                    parts.append(str(level))
                pow_ = _power(end - start)
                if pow_ is not None and pow_ >= -4 and pow_ != 0:
                    parts.append(f"<{pow_}")
                start_note = 0
                end_note = 0
        if sounding and start > end:
            pow_ = _power(start - end)
            if pow_ == 0:
                parts.append("R")
            elif pow_ is not None and pow_ >= -4:
                parts.append(f"R<{pow_}")
    return "".join(parts)


def str_to_music(text: str, midi_path, timbre: int = DEFAULT_TIMBRE) -> Path:
    """Write the melody as MIDI and render it to WAV with timidity; returns the WAV path."""
    midi_path = make_midi(midi_path, text, timbre)
    wav_path = Path(str(midi_path).replace(".mid", ".wav"))
    subprocess.run(
        ["timidity", str(midi_path), "-Ow", "-o", str(wav_path)],
        check=True,
    )
    return wav_path