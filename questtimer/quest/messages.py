"""Companion speech for each personality.

Three personalities (encouraging, gentle, playful) × three contexts
(start, complete, break), five templates each.  Templates use
``{adventurer}`` and ``{companion}`` placeholders.

Selection is random on purpose: the same moment should not always read
the same way.  Pass a seeded ``random.Random`` to make it repeatable.
"""

from __future__ import annotations

import random

from ..timer.engine import TimerMode


PERSONALITIES = ("encouraging", "gentle", "playful")
CONTEXTS = ("start", "complete", "break")

FALLBACK_TEMPLATE = "Great job, {adventurer}! Keep up the amazing work!"

TEMPLATES: dict[str, dict[str, tuple[str, ...]]] = {
    "encouraging": {
        "start": (
            "Go {adventurer}! You've got this! Let's conquer this quest together! 🌟",
            "You're absolutely amazing, {adventurer}! {companion} believes in your incredible strength! 💪",
            "Time to shine, {adventurer}! I'm here cheering you on every step of the way! ⚡",
            "You're unstoppable, {adventurer}! Let's show this challenge what we're made of! 🔥",
            "Ready to be awesome, {adventurer}? {companion} knows you'll crush this! 🚀",
        ),
        "complete": (
            "Amazing work, {adventurer}! {companion} is so proud of your dedication! You're unstoppable! 🎉",
            "INCREDIBLE job, {adventurer}! You just proved how powerful you are! Victory is yours! 🏆",
            "Outstanding, {adventurer}! {companion} is bursting with pride! You're a true champion! ⭐",
            "Phenomenal work, {adventurer}! You've shown such determination and strength! 💎",
            "Absolutely brilliant, {adventurer}! {companion} couldn't be more impressed! 🌟",
        ),
        "break": (
            "Fantastic job! Time to recharge your magical energy and celebrate your progress! ⚡",
            "You've earned this break, {adventurer}! Bask in the glory of your achievement! 🌟",
            "Victory celebration time! {companion} is so excited about your success! 🎊",
            "Time to power up, champion! You've been absolutely incredible! 💪",
            "Rest like the hero you are, {adventurer}! Your energy will return even stronger! ✨",
        ),
    },
    "gentle": {
        "start": (
            "Take a deep breath, {adventurer}. Let's focus together peacefully and mindfully 🌸",
            "Find your center, dear {adventurer}. {companion} is here to guide you gently 🕯️",
            "Let's move with intention and grace, {adventurer}. Peace flows through you 🌙",
            "Breathe in calm, breathe out focus, {adventurer}. We'll walk this path together serenely 🍃",
            "Gentle strength lives within you, {adventurer}. {companion} holds space for your journey 🌺",
        ),
        "complete": (
            "Well done, {adventurer}. {companion} believes in you and your gentle strength 💙",
            "Beautiful work, dear {adventurer}. Your mindful effort has blossomed into success 🌸",
            "Peace and accomplishment flow through you, {adventurer}. {companion} honors your dedication 🕊️",
            "Your gentle persistence has borne fruit, {adventurer}. Feel the quiet satisfaction within 🌿",
            "Gracefully done, {adventurer}. {companion} witnesses your inner light shining bright ✨",
        ),
        "break": (
            "Rest peacefully, dear adventurer. You've earned this moment of tranquility 🌙",
            "Let serenity wash over you, {adventurer}. {companion} watches over your rest 🌊",
            "Breathe deeply and release, {adventurer}. This quiet moment is yours to cherish 🍃",
            "Find stillness in this pause, dear {adventurer}. Peace surrounds you like gentle mist 🌸",
            "Rest in the garden of your accomplishment, {adventurer}. {companion} tends to your peace 🌺",
        ),
    },
    "playful": {
        "start": (
            "Adventure time, {adventurer}! Let's make this quest fun and exciting! Ready to play? 🎮",
            "Hero {adventurer}, your epic journey begins! {companion} is your trusty sidekick! 🗡️",
            "Level up time, {adventurer}! Let's turn this into the most fun quest ever! 🎯",
            "Game on, brave {adventurer}! {companion} has loaded your adventure - let's go! 🚀",
            "Quest activated, {adventurer}! Time to collect some XP and have a blast doing it! ⚡",
        ),
        "complete": (
            "Woohoo! {adventurer} and {companion} make an absolutely awesome team! Victory dance time! 🚀",
            "LEVEL UP! {adventurer} just earned major XP! {companion} is doing victory flips! 🎮",
            "Quest completed! {adventurer}, you're officially a legend! Time for the victory parade! 🎊",
            "BOOM! {adventurer} just crushed that challenge! {companion} is throwing confetti! 🎉",
            "Achievement unlocked! {adventurer} the Magnificent! {companion} is so proud! 🏆",
        ),
        "break": (
            "Play time! Let's recharge with some fun and get ready for the next exciting quest! 🎈",
            "Intermission time, {adventurer}! {companion} suggests a victory snack! 🍪",
            "Side quest: Relaxation Mode activated! Time to power up for the next adventure! 🎮",
            "Break time mini-game! {adventurer}, you've unlocked the 'Chill Zone' achievement! 🌟",
            "Checkpoint reached! {adventurer}, save your progress and enjoy this fun break! 🎯",
        ),
    },
}

COMPLETION_CAPTIONS: dict[TimerMode, str] = {
    TimerMode.QUICKWIN: "Treasure collected!",
    TimerMode.POMODORO: "Focus spell completed!",
    TimerMode.BREAK: "Rest period finished!",
    TimerMode.TREASURE_HUNT: "Treasure hunt completed!",
}
DEFAULT_CAPTION = "Quest completed!"


def completion_caption(mode: TimerMode) -> str:
    """Subtitle shown under the celebration message."""
    return COMPLETION_CAPTIONS.get(mode, DEFAULT_CAPTION)


class PersonalityMessenger:
    """Picks a companion line for a (personality, context) pair.

    Usage::

        messenger = PersonalityMessenger("Ada", "Pip")
        messenger.message("playful", "start")
    """

    def __init__(
        self,
        adventurer_name: str = "",
        companion_name: str = "",
        rng: random.Random | None = None,
    ) -> None:
        self._adventurer = adventurer_name
        self._companion = companion_name
        self._rng = rng or random.Random()

    @property
    def adventurer_name(self) -> str:
        return self._adventurer

    @property
    def companion_name(self) -> str:
        return self._companion

    def rename(self, adventurer_name: str, companion_name: str) -> None:
        self._adventurer = adventurer_name
        self._companion = companion_name

    def variants(self, personality: str, context: str) -> list[str]:
        """All rendered templates for the pair (empty if unknown)."""
        templates = TEMPLATES.get(personality, {}).get(context, ())
        return [self._render(t) for t in templates]

    def message(self, personality: str, context: str) -> str:
        """One randomly chosen line.  Never raises."""
        templates = TEMPLATES.get(personality, {}).get(context)
        if not templates:
            return self._render(FALLBACK_TEMPLATE)
        return self._render(self._rng.choice(templates))

    def _render(self, template: str) -> str:
        return template.format(
            adventurer=self._adventurer, companion=self._companion,
        )
