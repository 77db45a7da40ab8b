# zbkit

Building blocks for a group chat bot: timed reminders with a Chinese date
syntax, cron reminders, welcome and farewell messages, join verification
through a gist timestamp, a tiny MIDI note language and a handful of small
web lookups.

Every piece takes plain values and returns plain values (or sends through a
callable you pass in), so it can sit behind any bot framework.

## Installation

```
pip install zbkit
```

`zbkit.midi.str_to_music` renders MIDI to WAV by running the external
`timidity` program, which must be installed and on `PATH`.

## Reminders

`zbkit.timers.Timer` packs month, day, weekday, hour and minute into one
integer (`emdwhm`); `-1` in a field means "every", and weekday 0 is Sunday.
`filled_timer` takes the groups matched from a command such as
`在12月周一的12点0分时提醒大家test` (the groups are month, day or weekday,
hour, minute, optional `用<url>`, alert text). Invalid input yields a
disabled timer whose `alert` holds the reason.
`chinese_num_to_int` and `chinese_char_to_int` read the Chinese numerals.

```python
from datetime import datetime
from zbkit.timers import filled_timer
from zbkit.schedule import next_wake_time, should_fire

timer = filled_timer(["", "12", "周一", "12", "0", "", "test"], 0, 0, False)
print(timer.timer_info())   # normalised description, e.g. "[0]12月0日1周12:0"
print(timer.timer_id())     # 32-bit id derived from the description

now = datetime.now()
wake = next_wake_time(timer, now)
print(should_fire(timer, wake))
```

`zbkit.schedule.first_week` gives the first day of a month falling on a
given weekday.

Cron reminders are built with `filled_cron_timer`. `zbkit.cron.CronSchedule`
parses five-field expressions (with ranges, steps, lists, month and weekday
names and `@daily`-style descriptors) and offers `matches(moment)` and
`next_after(moment)`; bad expressions raise `CronError`.

A `Clock` (in `zbkit.clock`) keeps registered timers in memory, persists
them in a SQLite `TimerStore` and runs one background thread per active
timer. When a timer is due it calls `sender(self_id, grp_id, message)`,
where `message` is the list of segments from `build_alert_message` (an
@all, the alert text and, if set, the image URL).

```python
from zbkit.clock import Clock, TimerStore
from zbkit.timers import filled_cron_timer

with TimerStore("timers.db") as store, Clock(
    store, sender=lambda self_id, group_id, message: print(group_id, message)
) as clock:
    timer = filled_cron_timer("30 8 * * *", "good morning", "", 0, 12345)
    if clock.register_timer(timer, True):
        print(clock.list_timers(12345))
        clock.cancel_timer(timer.id)
```

Timers stored earlier are registered again when a `Clock` is created.

## Group management helpers

`zbkit.manager` holds the pure parts of group administration:

- `ban_seconds(amount, unit, self_ban)`: mute length in seconds, capped
  just below one month.
- `welcome_to_cq(template, uid, nickname, gid, group_name)`: fills `{at}`,
  `{nickname}`, `{avatar}`, `{uid}`, `{gid}` and `{groupname}`.
- `unescape_brackets`: turns `&#91;`/`&#93;` back into `[`/`]`.
- `apply_switch(data, option, enable_mask, disable_mask)` with the
  `VERIFY_*` and `GIST_*` masks; unknown words raise `ValueError`.
- `parse_join_answer(comment)`: splits `user/gisthash` from a join request.
- `pick_lucky_member`, `make_quiz` and `check_quiz_answer`.

Welcome and farewell templates and verified members live in a
`GroupStore` (`zbkit.groupstore`, SQLite). `zbkit.gist.check_new_user`
approves a join request when the gist file named after the MD5 of the group
number holds a Unix timestamp less than ten minutes old; `gist_url` builds
the address it reads.

## MIDI notes

`zbkit.midi` reads a compact note language (`CCGGAAGR FFEEDDCR`, with
`b`/`#`, octave digits and `<n` lengths of `2**n` quarter notes):

```python
from zbkit.midi import build_midi, process_one, note_name

print(process_one("C#6"))   # 73
print(note_name(61))        # "Db"
midi = build_midi("CCGGAAGR", 40)   # a mido.MidiFile
```

`make_midi` writes a file (leaving an existing one alone), `midi_to_text`
turns a track back into a note string, `str_to_music` renders WAV through
`timidity`, and `validate_timbre` checks an instrument number in 0–127.
Malformed note strings raise `MidiSyntaxError`.

## Other modules

- `zbkit.github`: `search_repo`, `format_repo`, `preview_url`, `search_url`,
  `net_get`, `notnull`.
- `zbkit.nbnhhsh`: abbreviation guessing with `guess` and `parse_guess`.
- `zbkit.juejuezi`: `build_payload`, `strip_keyword`, `request_text`.
- `zbkit.hyaku`: `Poem`, `load_poems` (checks all 100 rows) and `image_urls`.
- `zbkit.pixivsearch`: `search`, `parse_search`, `search_url`, `print_tags`,
  `clean_description`.
- `zbkit.nsfw`: `Scores`, `judge`, `auto_judge`.
- `zbkit.jandan`: `PictureStore`, `picture_id` (CRC-64/ISO) and the page
  helpers `extract_page_total`, `extract_pic_links`, `extract_previous_page`.
- `zbkit.hearthstone`: `extract_hash`, `search_url`, `deck_image_url`,
  `card_image_url`.
- `zbkit.nativewife`: `WifeGallery`, `daily_index`, `clean_name`,
  `everyone_switch`.

## What the package does not do

It does not connect to a chat server, listen for messages or dispatch
commands; the bot around it must match commands and send replies. It has no
holiday countdown or "moyu" daily message, and no per-group settings
storage beyond `GroupStore` and `TimerStore`.

## Tests

```
pip install "zbkit[test]"
pytest
```