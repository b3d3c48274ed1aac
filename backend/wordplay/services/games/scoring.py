from typing import Any, Dict, List, Optional

from ..sessions.session import Session

MEDALS = ['🥇', '🥈', '🥉']


def leaderboard_lines(session: Session) -> List[str]:
    lines = []
    for idx, player in enumerate(session.standings()):
        marker = MEDALS[idx] if idx < len(MEDALS) else f"{idx + 1}."
        out = ' (out)' if player.player_id in session.eliminated else ''
        lines.append(f"{marker} {player.name}: {player.score}{out}")
    return lines


def format_leaderboard(session: Session, title: str) -> str:
    lines = leaderboard_lines(session) or ['(no players)']
    return '\n'.join([f"📊 *{title}*"] + lines)


def format_results(session: Session, winner_id: Optional[str]) -> str:
    """Final message: winner line (if any) followed by the full standings."""
    header = '🏁 *Game over!*'
    if winner_id and winner_id in session.players:
        header += f"\n🏆 Winner: *{session.players[winner_id].name}*"
    else:
        header += '\nNo winner this time.'
    return header + '\n\n' + format_leaderboard(session, 'Final scores')


def summarize(session: Session, finished_at: float) -> Dict[str, Any]:
    return {
        'channel_id': session.channel_id,
        'game': session.game,
        'outcome': session.outcome,
        'rounds_played': session.round,
        'winner_id': session.winner_id,
        'scores': [
            {'player_id': p.player_id, 'name': p.name, 'score': p.score,
             'eliminated': p.player_id in session.eliminated}
            for p in session.standings()
        ],
        'created_at': session.created_at,
        'finished_at': finished_at,
    }
