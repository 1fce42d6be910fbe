import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from agents.generator import ContentGenerator, content_generator
from errors import WellnessHubError
from models import MOOD_EMOJI, EmotionCheckinRecord, EmotionSupport, Mood
from storage import to_iso, utc_now
from .logic_user import Session, require_session

logger = logging.getLogger(__name__)

UNAVAILABLE_MSG = "Could not generate support content at this time."
UNEXPECTED_MSG = "An error occurred while fetching your support content."


def mood_choices() -> List[str]:
    return [f"{MOOD_EMOJI[m]} {m.value}" for m in Mood]


def mood_from_choice(choice: str) -> str:
    """'😊 Happy' -> 'Happy'; free text is passed through trimmed."""
    text = (choice or "").strip()
    for mood in Mood:
        if text == mood.value or text == f"{MOOD_EMOJI[mood]} {mood.value}":
            return mood.value
    return text


def check_in(
    session: Optional[Session],
    mood: Union[Mood, str],
    history: List[EmotionCheckinRecord],
    generator: ContentGenerator = content_generator,
    now: Optional[datetime] = None,
) -> Tuple[Optional[EmotionSupport], List[EmotionCheckinRecord]]:
    """
    Fetch support content for a mood.

    On success a new record is put at the front of a copy of history; on
    failure history is returned unchanged alongside None.
    """
    session = require_session(session)
    label = mood.value if isinstance(mood, Mood) else mood
    support = generator.generate_emotion_support(label)
    if support is None:
        return None, list(history)

    now = now or utc_now()
    record = EmotionCheckinRecord(
        CheckinID=to_iso(now),
        UserID=session.user_id,
        CheckinDate=now.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
        Mood=label,
        Affirmation=support.Affirmation,
        StressReliefExercise=support.StressReliefExercise,
        PepTalk=support.PepTalk,
    )
    return support, [record] + list(history)


def render_support(support: EmotionSupport) -> str:
    return (
        f"### ✨ Your Affirmation\n{support.Affirmation}\n\n"
        f"### 🧘 A Quick Stress Relief Exercise\n{support.StressReliefExercise}\n\n"
        f"### 📣 A Little Pep Talk\n{support.PepTalk}"
    )


def render_history(history: List[EmotionCheckinRecord]) -> str:
    if not history:
        return ""
    lines = ["## Your Check-in History"]
    for record in history:
        lines.append(f"**{record.Mood} Check-in** · {record.CheckinDate}  \n_\"{record.Affirmation}\"_")
    return "\n\n".join(lines)


# ================== Gradio callbacks ==================


def checkin_action(choice, session_state, history_state, generator: ContentGenerator = content_generator):
    """Returns (support markdown, history markdown, history state, status)."""
    history = history_state or []
    mood = mood_from_choice(choice)
    if not mood:
        return "", render_history(history), history, "Please choose how you are feeling."
    try:
        support, new_history = check_in(session_state, mood, history, generator)
    except WellnessHubError as e:
        return "", render_history(history), history, e.message
    except Exception:
        logger.exception("Emotion check-in failed")
        return "", render_history(history), history, UNEXPECTED_MSG

    if support is None:
        return "", render_history(new_history), new_history, UNAVAILABLE_MSG
    return render_support(support), render_history(new_history), new_history, ""
