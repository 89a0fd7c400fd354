"""Collectible characters unlocked by drink category."""

from __future__ import annotations

from dataclasses import dataclass

EXP_PER_LEVEL = 100


@dataclass(frozen=True)
class EvolutionStage:
    stage: int
    name: str
    image: str
    required_level: int


@dataclass(frozen=True)
class Character:
    id: str
    name: str
    description: str
    type: str
    evolution_stages: tuple[EvolutionStage, ...]

    @property
    def base_image(self) -> str:
        return self.evolution_stages[0].image


def _stages(character_id: str, names: tuple[str, str, str, str]) -> tuple[EvolutionStage, ...]:
    levels = (1, 3, 5, 10)
    return tuple(
        EvolutionStage(
            stage=index + 1,
            name=name,
            image=f"/characters/{character_id}-{index + 1}.png",
            required_level=level,
        )
        for index, (name, level) in enumerate(zip(names, levels))
    )


CHARACTERS: tuple[Character, ...] = (
    Character(
        "premol", "プレモルくん", "A golden beer glass wearing a crown", "beer",
        _stages("premol", ("銅の王冠", "銀の王冠", "金の王冠", "プラチナ王冠")),
    ),
    Character(
        "kakuhai", "角ハイ坊や", "A lively highball bottle", "highball",
        _stages("kakuhai", ("ミニ角瓶", "通常サイズ", "メガジョッキ", "伝説の角瓶")),
    ),
    Character(
        "sui", "翠ジン妖精", "A fresh jade-colored gin fairy", "gin",
        _stages("sui", ("種", "芽", "花", "翡翠の木")),
    ),
    Character(
        "lemon", "レモンサワー兄弟", "Twin lemon sour brothers", "sour",
        _stages("lemon", ("小レモン", "氷入り", "凍結ジョッキ", "極冷")),
    ),
    Character(
        "allfree", "オールフリー先生", "A healthy non-alcoholic mentor", "non_alcohol",
        _stages("allfree", ("新人", "先生", "博士", "賢者")),
    ),
    Character(
        "water", "天然水スピリット", "A transparent water spirit", "water",
        _stages("water", ("雫", "泉", "滝", "海")),
    ),
)

# Water has a character but capturing water does not unlock it.
CATEGORY_UNLOCKS: dict[str, str] = {
    "draft_beer": "premol",
    "highball": "kakuhai",
    "gin_soda": "sui",
    "sour": "lemon",
    "non_alcohol": "allfree",
}


def get_character(character_id: str) -> Character | None:
    return next((c for c in CHARACTERS if c.id == character_id), None)


def character_for_category(category: str) -> str | None:
    """Id of the character a capture of this category unlocks."""
    return CATEGORY_UNLOCKS.get(category)


def evolution_stage(character: Character, level: int) -> EvolutionStage:
    """Highest stage the level qualifies for, or the first stage."""
    reached = [stage for stage in character.evolution_stages if level >= stage.required_level]
    if not reached:
        return character.evolution_stages[0]
    return max(reached, key=lambda stage: stage.required_level)


def exp_for_next_level(level: int) -> int:
    return level * EXP_PER_LEVEL


def exp_progress(exp: int, level: int) -> float:
    """Percent of the way from the current level to the next, 0-100."""
    progress = exp - (level - 1) * EXP_PER_LEVEL
    return max(0.0, min(100.0, progress / EXP_PER_LEVEL * 100))
