"""
CSV export of a tournament session (semicolon separated).
"""
import csv
import io
from datetime import date

from engine.models import team_label
from engine.session import FIXED_TEAM


def _write_header(writer, session, entries_label):
    mode_label = 'Singles/Teams' if session.mode == FIXED_TEAM else 'Doubles (Americano)'
    writer.writerow(['Tournament Export'])
    writer.writerow([])
    writer.writerow(['Mode', mode_label])
    writer.writerow([entries_label, ', '.join(session.roster)])
    writer.writerow(['Courts', session.courts])
    writer.writerow(['Date', date.today().isoformat()])
    writer.writerow([])


def _score_text(value):
    return '' if value is None else value


def export_csv(session) -> str:
    """Render the session's rounds, scores and standings as CSV text."""
    output = io.StringIO()
    writer = csv.writer(output, delimiter=';', lineterminator='\n')

    if session.mode == FIXED_TEAM:
        _write_header(writer, session, 'Teams')
        writer.writerow(['SCOREBOARD'])
        writer.writerow(['Team', 'Won', 'Lost', 'Points', 'Diff'])
        for row in session.standings():
            writer.writerow([row['team'], row['won'], row['lost'], row['points'], row['diff']])
        writer.writerow([])

        writer.writerow(['ROUNDS & SCORES'])
        writer.writerow(['Round', 'Court', 'Team 1', 'Score 1', 'Team 2', 'Score 2'])
        for rnd in session.rounds:
            for court, match in enumerate(rnd.matches, start=1):
                writer.writerow([rnd.number, f'Court {court}',
                                 team_label(match.team_a), _score_text(match.score_a),
                                 team_label(match.team_b), _score_text(match.score_b)])
        return output.getvalue()

    _write_header(writer, session, 'Players')
    writer.writerow(['ROUNDS'])
    writer.writerow(['Round', 'Court', 'Player 1', 'Player 2', 'vs', 'Player 3', 'Player 4',
                     'Score 1', 'Score 2', 'Sitting Out'])
    for rnd in session.rounds:
        sitting_out = ', '.join(rnd.sit_out)
        for court, match in enumerate(rnd.matches, start=1):
            writer.writerow([rnd.number, f'Court {court}', *match.team_a, 'vs', *match.team_b,
                             _score_text(match.score_a), _score_text(match.score_b), sitting_out])

    if session.completed_matches():
        writer.writerow([])
        writer.writerow(['RANKING'])
        writer.writerow(['Rank', 'Player', 'Rating', 'Games', 'Won', 'Lost', 'Points', 'Diff'])
        for row in session.ranking():
            writer.writerow([row['rank'], row['player'], row['rating'], row['games'],
                             row['won'], row['lost'], row['points_for'], row['diff']])
    return output.getvalue()
