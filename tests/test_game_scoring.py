from scorekeeper.game_scoring import (
    calculate_game_end_scores,
    calculate_nectar_points,
    rank_players,
    score_resource_pool,
)
from scorekeeper.ranking import competition_groups, split_points
from scorekeeper.schemas import PlayerGameEnd


def nectar_players(**counts) -> list[PlayerGameEnd]:
    return [PlayerGameEnd(player_name=name, nectar_forest=count) for name, count in counts.items()]


def forest(players):
    return score_resource_pool(players, lambda p: p.nectar_forest)


def test_competition_groups_skip_ranks_after_ties():
    groups = competition_groups([9, 9, 7, 5, 5, 5, 1], key=lambda v: v)
    assert [(g.rank, g.size) for g in groups] == [(1, 2), (3, 1), (4, 3), (7, 1)]


def test_split_points_ignores_ranks_past_table():
    assert split_points((5, 2), 1, 2) == 3
    assert split_points((5, 2), 2, 2) == 1
    assert split_points((5, 2), 3, 4) == 0
    assert split_points((6, 3, 2), 1, 3) == 3


def test_resource_pool_single_winner():
    assert forest(nectar_players(A=5, B=3, C=0)) == {"A": 5, "B": 2}


def test_resource_pool_two_way_tie_for_first():
    assert forest(nectar_players(A=4, B=4, C=2)) == {"A": 3, "B": 3, "C": 0}


def test_resource_pool_two_way_tie_for_second():
    assert forest(nectar_players(A=6, B=3, C=3)) == {"A": 5, "B": 1, "C": 1}


def test_resource_pool_three_way_tie_for_first():
    assert forest(nectar_players(A=2, B=2, C=2)) == {"A": 2, "B": 2, "C": 2}


def test_resource_pool_excludes_zero_and_negative_counts():
    points = forest(nectar_players(A=0, B=1, C=-3))
    assert points == {"B": 5}


def test_resource_pool_no_nectar():
    assert forest(nectar_players(A=0, B=0)) == {}
    assert forest([]) == {}


def test_resource_pool_four_plus_players():
    points = forest(nectar_players(A=5, B=4, C=3, D=2, E=1))
    assert points == {"A": 5, "B": 2, "C": 0, "D": 0, "E": 0}


def test_nectar_points_scored_per_habitat():
    players = [
        PlayerGameEnd(player_name="Alice", nectar_forest=3, nectar_grassland=0, nectar_wetland=1),
        PlayerGameEnd(player_name="Bob", nectar_forest=1, nectar_grassland=2, nectar_wetland=1),
    ]
    nectar = calculate_nectar_points(players)
    assert nectar.forest == {"Alice": 5, "Bob": 2}
    assert nectar.grassland == {"Bob": 5}
    assert nectar.wetland == {"Alice": 3, "Bob": 3}


def test_game_end_without_oceania():
    players = [
        PlayerGameEnd(player_name="Bob", bird_points=5, bonus_cards=2, round_goals=1, eggs=1, cached_food=1, tucked_cards=1),
        PlayerGameEnd(player_name="Alice", bird_points=10, bonus_cards=3, round_goals=2, eggs=2, cached_food=1, tucked_cards=2,
                      nectar_forest=4),
    ]
    ranked, nectar = calculate_game_end_scores(players, include_oceania=False)

    assert [(p.player_name, p.total, p.rank) for p in ranked] == [("Alice", 20, 1), ("Bob", 11, 2)]
    assert nectar.forest == {} and nectar.grassland == {} and nectar.wetland == {}


def test_game_end_does_not_modify_input():
    players = [PlayerGameEnd(player_name="Alice", bird_points=10), PlayerGameEnd(player_name="Bob", bird_points=20)]
    ranked, _ = calculate_game_end_scores(players, include_oceania=False)
    assert [p.total for p in players] == [0, 0]
    assert [p.rank for p in players] == [0, 0]
    assert ranked[0] is not players[1]
    assert ranked[0].player_name == "Bob"


def test_game_end_with_oceania_adds_nectar_points():
    players = [
        PlayerGameEnd(player_name="Alice", bird_points=40, nectar_forest=3, nectar_grassland=1, nectar_wetland=0),
        PlayerGameEnd(player_name="Bob", bird_points=40, nectar_forest=3, nectar_grassland=2, nectar_wetland=0),
        PlayerGameEnd(player_name="Carol", bird_points=41, nectar_forest=0, nectar_grassland=0, nectar_wetland=2),
    ]
    ranked, nectar = calculate_game_end_scores(players, include_oceania=True)

    assert nectar.forest == {"Alice": 3, "Bob": 3}
    assert nectar.grassland == {"Bob": 5, "Alice": 2}
    assert nectar.wetland == {"Carol": 5}
    totals = {p.player_name: p.total for p in ranked}
    assert totals == {"Alice": 45, "Bob": 48, "Carol": 46}
    assert [p.player_name for p in ranked] == ["Bob", "Carol", "Alice"]
    assert [p.rank for p in ranked] == [1, 2, 3]


def test_ranking_tie_broken_by_unused_food():
    players = [
        PlayerGameEnd(player_name="Alice", total=90, unused_food=1),
        PlayerGameEnd(player_name="Bob", total=90, unused_food=4),
    ]
    ranked = rank_players(players)
    assert [(p.player_name, p.rank) for p in ranked] == [("Bob", 1), ("Alice", 2)]


def test_ranking_complete_tie_shares_rank():
    players = [
        PlayerGameEnd(player_name="Alice", total=90, unused_food=2),
        PlayerGameEnd(player_name="Bob", total=90, unused_food=2),
        PlayerGameEnd(player_name="Carol", total=80),
    ]
    ranked = rank_players(players)
    assert [(p.player_name, p.rank) for p in ranked] == [("Alice", 1), ("Bob", 1), ("Carol", 3)]


def test_ranking_multiple_groups():
    players = [
        PlayerGameEnd(player_name="E", total=70),
        PlayerGameEnd(player_name="A", total=100, unused_food=1),
        PlayerGameEnd(player_name="B", total=100, unused_food=1),
        PlayerGameEnd(player_name="C", total=85, unused_food=3),
        PlayerGameEnd(player_name="D", total=85, unused_food=3),
    ]
    ranked = rank_players(players)
    assert [p.rank for p in ranked] == [1, 1, 3, 3, 5]
    for first, second in zip(ranked, ranked[1:]):
        assert (first.total, first.unused_food) >= (second.total, second.unused_food)


def test_game_end_single_player():
    ranked, _ = calculate_game_end_scores([PlayerGameEnd(player_name="Solo", eggs=3)], include_oceania=True)
    assert ranked[0].rank == 1
    assert ranked[0].total == 3


def test_game_end_empty_players():
    ranked, nectar = calculate_game_end_scores([], include_oceania=True)
    assert ranked == []
    assert nectar.forest == {} and nectar.grassland == {} and nectar.wetland == {}
