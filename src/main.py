# Entry point for running a tournament from a YAML file

import argparse
import sys
import yaml
from engine.errors import TournamentError
from engine.export import export_csv
from engine.models import team_label
from engine.session import TournamentSession, get_default_settings, ROTATING_DOUBLES


def load_tournament_file(file_path):
    """
    Read a tournament description.

    Expected keys: players (list of names), and optionally mode, courts,
    ranked, seed, max_courts and scores (list of {round, court, score_a, score_b}
    with one-based round and court numbers).
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}
    settings = get_default_settings()
    settings.update({k: v for k, v in data.items() if k in settings})
    players = [str(p).strip() for p in data.get('players') or [] if p is not None and str(p).strip()]
    return settings, players, data.get('scores') or []


def apply_scores(session, scores):
    """Enter scores that refer to rounds already generated. Returns the number applied."""
    applied = 0
    for entry in scores:
        round_index = int(entry['round']) - 1
        court_index = int(entry['court']) - 1
        if round_index >= session.round_number:
            continue
        session.set_match_score(round_index, court_index, entry.get('score_a'), entry.get('score_b'))
        applied += 1
    return applied


def print_round(rnd):
    print(f"# Round {rnd.number}")
    if not rnd.matches:
        print("  No matches scheduled.")
    for court, match in enumerate(rnd.matches, start=1):
        line = f"  Court {court}: {team_label(match.team_a)} vs {team_label(match.team_b)}"
        if match.is_completed:
            score_a, score_b = match.scores()
            line += f"  ({score_a}-{score_b})"
        print(line)
    print(f"  Sit out: {', '.join(rnd.sit_out) or 'None'}")


def print_table(session):
    if session.mode == ROTATING_DOUBLES:
        print("\n--- Ranking ---")
        for row in session.ranking():
            print(f"{row['rank']:>3}. {row['player']:<20} {row['rating']:>8.2f}  "
                  f"{row['won']}-{row['lost']}  pts {row['points_for']}  diff {row['diff']:+d}")
    else:
        print("\n--- Standings ---")
        for row in session.standings():
            print(f"{row['team']:<20} W {row['won']}  L {row['lost']}  pts {row['points']}  diff {row['diff']:+d}")


def main():
    parser = argparse.ArgumentParser(
        description='Schedule rounds of a multi-court doubles or round-robin tournament'
    )
    parser.add_argument('tournament_file', help='Tournament YAML file')
    parser.add_argument(
        '--rounds',
        type=int,
        default=None,
        help='Rotating-doubles rounds to generate (default: one per recorded score round, at least 1)'
    )
    parser.add_argument('--csv', help='Write a CSV export to this path')

    args = parser.parse_args()

    settings, players, scores = load_tournament_file(args.tournament_file)
    try:
        session = TournamentSession(
            players,
            settings['courts'],
            mode=settings['mode'],
            ranked=settings['ranked'],
            seed=settings['seed'],
            max_courts=settings['max_courts'],
        )
        session.start()
        if session.mode == ROTATING_DOUBLES:
            target = args.rounds
            if target is None:
                target = max([1] + [int(s['round']) for s in scores])
            # scores for a round are entered before the next one is drawn
            apply_scores(session, [s for s in scores if int(s['round']) == 1])
            while session.round_number < target:
                session.next_round()
                apply_scores(session, [s for s in scores if int(s['round']) == session.round_number])
            skipped = [s for s in scores if int(s['round']) > session.round_number]
            if skipped:
                print(f"Note: ignored {len(skipped)} score entries for rounds after round {session.round_number}",
                      file=sys.stderr)
        else:
            apply_scores(session, scores)
    except (TournamentError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for rnd in session.rounds:
        print_round(rnd)
    print_table(session)

    if args.csv:
        with open(args.csv, 'w', encoding='utf-8', newline='') as f:
            f.write(export_csv(session))
        print(f"\nExported to {args.csv}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
