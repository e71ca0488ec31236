"""Tests for pokedex.core.quiz – quiz data and question building."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from pokedex.core.catalog import Ability, Creature, EvolutionNode, Stat
from pokedex.core.quiz import (
    NONE_OF_THESE,
    OPTIONS_PER_QUESTION,
    QUESTIONS_PER_QUIZ,
    QuizBank,
    build_questions,
    evolution_line,
)


def _creature(**overrides) -> Creature:
    fields = dict(
        id=25,
        name="pikachu",
        types=("electric",),
        stats=(Stat("hp", 35), Stat("speed", 90)),
        height=4,
        weight=60,
        abilities=(Ability("static"), Ability("lightning-rod", is_hidden=True)),
        moves=("thunder-shock", "quick-attack", "thunderbolt"),
        artwork_url="",
        species_url="https://pokeapi.co/api/v2/pokemon-species/25/",
    )
    fields.update(overrides)
    return Creature(**fields)


PIKACHU_LINE = EvolutionNode(
    name="pichu",
    species_id=172,
    evolves_to=(
        EvolutionNode(
            name="pikachu",
            species_id=25,
            trigger="level-up",
            evolves_to=(EvolutionNode(name="raichu", species_id=26, item="thunder-stone"),),
        ),
    ),
)


@pytest.fixture(scope="module")
def bank() -> QuizBank:
    return QuizBank()


# ---------------------------------------------------------------------------
# QuizBank – bundled data
# ---------------------------------------------------------------------------

class TestQuizBank:
    def test_all_types_present(self, bank: QuizBank):
        assert len(bank.types) == 18
        assert "electric" in bank.types

    def test_weaknesses_single_type(self, bank: QuizBank):
        assert bank.weaknesses(["electric"]) == ["ground"]

    def test_weaknesses_dual_type_without_duplicates(self, bank: QuizBank):
        weaknesses = bank.weaknesses(["grass", "poison"])
        assert weaknesses[0] == "fire"
        assert len(weaknesses) == len(set(weaknesses))
        assert "ground" in weaknesses

    def test_unknown_type_has_no_weaknesses(self, bank: QuizBank):
        assert bank.weaknesses(["shadow"]) == []

    def test_pools_are_large_enough(self, bank: QuizBank):
        for pool in (bank.type_combinations, bank.moves, bank.abilities):
            assert len(pool) >= OPTIONS_PER_QUESTION


class TestQuizBankErrors:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            QuizBank(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "quiz.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            QuizBank(path)

    def test_small_pool(self, tmp_path: Path):
        path = tmp_path / "quiz.yaml"
        path.write_text(
            "weaknesses:\n  normal: [fighting]\n"
            "type_combinations: [a/b, c/d, e/f, g/h]\n"
            "moves: [one, two]\n"
            "abilities: [w, x, y, z]\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="moves"):
            QuizBank(path)

    def test_custom_file(self, tmp_path: Path):
        path = tmp_path / "quiz.yaml"
        path.write_text(
            "weaknesses:\n  normal: [fighting]\n  fighting: [flying]\n"
            "type_combinations: [a/b, c/d, e/f, g/h]\n"
            "moves: [m1, m2, m3, m4]\n"
            "abilities: [w, x, y, z]\n",
            encoding="utf-8",
        )
        custom = QuizBank(path)
        assert custom.types == ["normal", "fighting"]
        assert custom.moves == ["m1", "m2", "m3", "m4"]


# ---------------------------------------------------------------------------
# build_questions
# ---------------------------------------------------------------------------

class TestBuildQuestions:
    def test_five_questions(self, bank: QuizBank):
        questions = build_questions(_creature(), PIKACHU_LINE, bank, random.Random(1))
        assert len(questions) == QUESTIONS_PER_QUIZ

    @pytest.mark.parametrize("seed", range(10))
    def test_options_are_unique_and_contain_answer(self, bank: QuizBank, seed: int):
        for question in build_questions(_creature(), PIKACHU_LINE, bank, random.Random(seed)):
            assert question.correct in question.options
            assert len(question.options) == OPTIONS_PER_QUESTION
            assert len(set(question.options)) == OPTIONS_PER_QUESTION

    def test_expected_answers(self, bank: QuizBank):
        type_q, weakness_q, move_q, ability_q, evolution_q = build_questions(
            _creature(), PIKACHU_LINE, bank, random.Random(3)
        )
        assert type_q.correct == "Electric"
        assert weakness_q.correct == "Ground"
        assert move_q.correct in {"Thunder Shock", "Quick Attack", "Thunderbolt"}
        assert ability_q.correct == "Static"
        assert evolution_q.correct == "Pichu → Pikachu → Raichu"

    def test_dual_type_answer(self, bank: QuizBank):
        creature = _creature(id=1, name="bulbasaur", types=("grass", "poison"))
        type_q = build_questions(creature, None, bank, random.Random(0))[0]
        assert type_q.correct == "Grass/Poison"

    def test_move_distractors_are_not_learnable(self, bank: QuizBank):
        creature = _creature(moves=("hydro-cannon",))
        move_q = build_questions(creature, None, bank, random.Random(0))[2]
        assert move_q.correct == "Hydro Cannon"
        assert move_q.options.count("Hydro Cannon") == 1

    def test_creature_without_moves(self, bank: QuizBank):
        move_q = build_questions(_creature(moves=()), None, bank, random.Random(0))[2]
        assert move_q.correct == NONE_OF_THESE
        assert NONE_OF_THESE in move_q.options

    def test_no_evolution(self, bank: QuizBank):
        creature = _creature(id=128, name="tauros", types=("normal",))
        single = EvolutionNode(name="tauros", species_id=128)
        evolution_q = build_questions(creature, single, bank, random.Random(0))[4]
        assert evolution_q.correct == "Tauros (No evolution)"
        assert len(set(evolution_q.options)) == OPTIONS_PER_QUESTION

    def test_unknown_chain_skips_evolution_question(self, bank: QuizBank):
        questions = build_questions(_creature(), None, bank, random.Random(0))
        assert len(questions) == QUESTIONS_PER_QUIZ - 1
        assert all("evolution" not in q.prompt for q in questions)
        assert all("(No evolution)" not in q.correct for q in questions)

    def test_deterministic_with_seed(self, bank: QuizBank):
        a = build_questions(_creature(), PIKACHU_LINE, bank, random.Random(42))
        b = build_questions(_creature(), PIKACHU_LINE, bank, random.Random(42))
        assert a == b


class TestTypeCombinations:
    def test_reordered_combination_is_not_a_distractor(self, tmp_path: Path):
        path = tmp_path / "quiz.yaml"
        path.write_text(
            "weaknesses:\n  normal: [fighting]\n  flying: [electric]\n"
            "type_combinations: [flying/normal, normal/flying, fire/water, grass/ice, rock/ghost]\n"
            "moves: [m1, m2, m3, m4]\n"
            "abilities: [w, x, y, z]\n",
            encoding="utf-8",
        )
        creature = _creature(id=16, name="pidgey", types=("normal", "flying"))
        for seed in range(10):
            type_q = build_questions(creature, None, QuizBank(path), random.Random(seed))[0]
            assert type_q.correct == "Normal/Flying"
            assert "Flying/Normal" not in type_q.options
            assert len(set(type_q.options)) == OPTIONS_PER_QUESTION

    def test_equivalent_distractors_appear_once(self, tmp_path: Path):
        path = tmp_path / "quiz.yaml"
        path.write_text(
            "weaknesses:\n  normal: [fighting]\n"
            "type_combinations: [fire/water, water/fire, grass/ice, rock/ghost]\n"
            "moves: [m1, m2, m3, m4]\n"
            "abilities: [w, x, y, z]\n",
            encoding="utf-8",
        )
        creature = _creature(id=16, name="pidgey", types=("normal", "flying"))
        type_q = build_questions(creature, None, QuizBank(path), random.Random(0))[0]
        assert sorted(type_q.options) == ["Fire/Water", "Grass/Ice", "Normal/Flying", "Rock/Ghost"]


class TestEvolutionLine:
    def test_follows_first_branch(self):
        assert evolution_line(_creature(), PIKACHU_LINE) == ["Pichu", "Pikachu", "Raichu"]

    def test_missing_chain_uses_creature(self):
        assert evolution_line(_creature(), None) == ["Pikachu"]
