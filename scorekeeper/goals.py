from __future__ import annotations

import random
from typing import Sequence

from scorekeeper.schemas import Expansion, Goal, RoundGoals


def _goal(goal_id: str, name: str, description: str, expansion: Expansion) -> Goal:
    return Goal(id=goal_id, name=name, description=description, expansion=expansion)


def _base(goal_id: str, name: str, description: str) -> Goal:
    return _goal(goal_id, name, description, Expansion.base)


def _european(goal_id: str, name: str, description: str) -> Goal:
    return _goal(goal_id, name, description, Expansion.european)


def _oceania(goal_id: str, name: str, description: str) -> Goal:
    return _goal(goal_id, name, description, Expansion.oceania)


# 8 double-sided tiles
BASE_GAME_GOALS: list[Goal] = [
    _base("base-birds-forest", "Birds in Forest", "Count the total number of birds you have played in your forest habitat"),
    _base("base-birds-grassland", "Birds in Grassland", "Count the total number of birds you have played in your grassland habitat"),
    _base("base-birds-wetland", "Birds in Wetland", "Count the total number of birds you have played in your wetland habitat"),
    _base("base-birds-bowl-egg", "Birds with Bowl Nests + Egg", "Count birds with a bowl nest that have at least 1 egg (star nests count)"),
    _base("base-birds-cavity-egg", "Birds with Cavity Nests + Egg", "Count birds with a cavity nest that have at least 1 egg (star nests count)"),
    _base("base-birds-ground-egg", "Birds with Ground Nests + Egg", "Count birds with a ground nest that have at least 1 egg"),
    _base("base-birds-platform-egg", "Birds with Platform Nests + Egg", "Count birds with a platform nest that have at least 1 egg (star nests count)"),
    _base("base-eggs-forest", "Eggs in Forest", "Count the total number of eggs in your forest habitat (multiple eggs on one bird each count)"),
    _base("base-eggs-grassland", "Eggs in Grassland", "Count the total number of eggs in your grassland habitat (multiple eggs on one bird each count)"),
    _base("base-eggs-wetland", "Eggs in Wetland", "Count the total number of eggs in your wetland habitat (multiple eggs on one bird each count)"),
    _base("base-eggs-bowl", "Eggs on Bowl Nests", "Count the total number of eggs on birds with a bowl nest (star nests count)"),
    _base("base-eggs-cavity", "Eggs on Cavity Nests", "Count the total number of eggs on birds with a cavity nest (star nests count)"),
    _base("base-eggs-ground", "Eggs on Ground Nests", "Count the total number of eggs on birds with a ground nest"),
    _base("base-eggs-platform", "Eggs on Platform Nests", "Count the total number of eggs on birds with a platform nest (star nests count)"),
    _base("base-egg-sets", "Sets of Eggs in Each Habitat", "Count sets of eggs (1 set = 1 egg in wetland + 1 egg in grassland + 1 egg in forest)"),
    _base("base-total-birds", "Total Birds Played", "Count the total number of birds you have played"),
]

EUROPEAN_GOALS: list[Goal] = [
    _european("eu-birds-tucked", "Birds with Tucked Cards", "Count the total number of birds that have at least 1 tucked card"),
    _european("eu-food-cost", "Food Cost of Played Birds", "Count the total number of food symbols in the food cost of your bird cards"),
    _european("eu-birds-one-row", "Birds in One Row", "Count birds in the single habitat row where you have the most birds"),
    _european("eu-filled-columns", "Filled Columns", "Count the number of columns with all 5 spaces filled"),
    _european("eu-brown-powers", "Birds with Brown Powers", "Count the total number of birds with brown (when activated) powers"),
    _european("eu-white-no-powers", "Birds with White/No Powers", "Count the total number of birds with white (when played) or no powers"),
    _european("eu-birds-high-value", "Birds Worth > 4 Points", "Count the total number of birds worth more than 4 victory points"),
    _european("eu-birds-no-eggs", "Birds with No Eggs", "Count the total number of birds that have no eggs on them"),
    _european("eu-food-supply", "Food in Personal Supply", "Count the total number of food tokens in your personal supply"),
    _european("eu-cards-hand", "Bird Cards in Hand", "Count the total number of bird cards in your hand"),
]

OCEANIA_GOALS: list[Goal] = [
    _oceania("oc-beak-left", "Beak Pointing Left", "Count the total number of birds whose beak is pointing left"),
    _oceania("oc-beak-right", "Beak Pointing Right", "Count the total number of birds whose beak is pointing right"),
    _oceania("oc-invertebrate-cost", "Invertebrate in Food Cost", "Count the number of invertebrate symbols in the food cost of your bird cards"),
    _oceania("oc-fruit-seed-cost", "Fruit + Seed in Food Cost", "Count the total number of fruit and seed symbols in the food cost of your bird cards"),
    _oceania("oc-no-goal", "No Goal", "No goal is scored this round. Keep your action cube and gain 1 extra turn in all following rounds"),
    _oceania("oc-rat-fish-cost", "Rat + Fish in Food Cost", "Count the total number of rat and fish symbols in the food cost of your bird cards"),
    _oceania("oc-cubes-play-bird", "Cubes on Play a Bird", 'Count the total number of action cubes on the "Play a Bird" action'),
    _oceania("oc-birds-low-value", "Birds Worth ≤ 3 Points", "Count the total number of birds worth 3 or fewer victory points"),
]


def get_all_goals(include_base: bool, include_european: bool, include_oceania: bool) -> list[Goal]:
    goals: list[Goal] = []
    if include_base:
        goals.extend(BASE_GAME_GOALS)
    if include_european:
        goals.extend(EUROPEAN_GOALS)
    if include_oceania:
        goals.extend(OCEANIA_GOALS)
    return goals


def select_random_goals(available: Sequence[Goal], rng: random.Random | None = None) -> RoundGoals:
    """Draw 4 distinct goals, one per round.

    With fewer than 4 goals available they are used in order and the
    remaining rounds stay empty.
    """
    picked = list(available)
    if len(picked) >= 4:
        (rng or random.SystemRandom()).shuffle(picked)
    rounds = dict(zip(("round1", "round2", "round3", "round4"), picked[:4]))
    return RoundGoals(**rounds)
