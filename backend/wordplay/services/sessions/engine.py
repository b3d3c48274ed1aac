"""Session engine: every state transition of every channel's game.

Inbound events (create, join, answer, force end) and timer firings all enter
through this class and run under one re-entrant lock, so a handler turn is
never interleaved with another. The only place the lock is dropped mid-turn
is the dictionary lookup for word chain answers; the code after it fetches
the session again and re-checks token, phase and generation before touching
anything.

Timer callbacks receive ``(channel_id, token, generation)`` captured when
they were scheduled. ``_guard`` compares those with the live session and
discards the firing when anything moved on (round closed, session ended or
replaced). That check is what stops a round timeout from racing a correct
answer or the watchdog into a double transition.
"""
import logging
import threading
from typing import Callable, Dict, Optional

from ..games.base import GameRules, Verdict
from ..games.scoring import format_leaderboard, format_results, summarize
from .errors import ConfigurationError, UnknownGame
from .session import Phase, Player, Session
from .timers import SessionTimers

GAME_TITLES = {'unscramble': 'Unscramble', 'wordchain': 'Word Chain'}


class SessionEngine:
    def __init__(self, registry, rules: Dict[str, GameRules], notifier,
                 join_seconds: float = 60, join_reminders=(30, 10), round_reminders=(10,),
                 watchdog_seconds: float = 900, leaderboard_every: int = 5,
                 on_finished: Optional[Callable[[dict], None]] = None, logger=None):
        self.registry = registry
        self.clock = registry.clock
        self.rules = rules
        self.notifier = notifier
        self.join_seconds = join_seconds
        self.join_reminders = tuple(join_reminders)
        self.round_reminders = tuple(round_reminders)
        self.watchdog_seconds = watchdog_seconds
        self.leaderboard_every = leaderboard_every
        self.on_finished = on_finished
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

    # ---- inbound events ----

    def create(self, channel_id: str, game: str) -> Session:
        """Open a session in the joining phase.

        Raises UnknownGame, SessionAlreadyActive, or ConfigurationError (after
        telling the channel and dropping the session).
        """
        with self._lock:
            rules = self.rules.get(game)
            if rules is None:
                raise UnknownGame(game)
            session = self.registry.create(channel_id, game)
            session.turn_based = rules.turn_based
            self.logger.info(f"[session-create] channel={channel_id} game={game} token={session.token}")
            try:
                rules.prepare()
            except ConfigurationError as exc:
                self._abort(session, exc)
                raise
            self._start(session, rules)
            return session

    def join(self, channel_id: str, player_id: str, name: Optional[str] = None) -> str:
        with self._lock:
            session = self.registry.get(channel_id)
            if session is None:
                return 'no_session'
            if session.phase is not Phase.JOINING:
                return 'closed'
            if player_id in session.players:
                return 'already_joined'
            player = Player(player_id=player_id, name=name or player_id, joined_at=self.clock.now())
            session.players[player_id] = player
            self.notifier.send_text(
                channel_id, f"👋 {player.name} joined ({len(session.players)} players)", [player_id]
            )
            self._publish(session)
            return 'joined'

    def answer(self, channel_id: str, player_id: str, text: str, message_ref: Optional[str] = None) -> str:
        """Apply one candidate answer.

        Returns 'accepted', 'rejected', 'ignored' (no open round, or not this
        player's turn) or 'stale' (the round moved on during the lookup).
        """
        with self._lock:
            session = self.registry.get(channel_id)
            if session is None or session.phase is not Phase.PLAYING or session.payload is None:
                return 'ignored'
            rules = self.rules[session.game]
            if not rules.may_submit(session, player_id):
                return 'ignored'
            verdict = rules.check(session, text)
            if not verdict.accepted:
                self._reject(session, player_id, verdict, message_ref)
                return 'rejected'
            if not rules.needs_lookup:
                return self._accept(session, rules, player_id, verdict, message_ref)
            token, generation = session.token, session.generation

        verdict = rules.lookup(verdict)

        with self._lock:
            session = self.registry.get(channel_id)
            if (session is None or session.token != token or session.phase is not Phase.PLAYING
                    or session.generation != generation or session.payload is None
                    or not rules.may_submit(session, player_id)):
                self.logger.info(f"[answer-stale] channel={channel_id} player={player_id} generation={generation}")
                return 'stale'
            if not verdict.accepted:
                self._reject(session, player_id, verdict, message_ref)
                return 'rejected'
            return self._accept(session, rules, player_id, verdict, message_ref)

    def force_end(self, channel_id: str, requester_id: Optional[str] = None) -> bool:
        """End the channel's session now. False if there was nothing to end."""
        with self._lock:
            session = self.registry.get(channel_id)
            if session is None or session.phase is Phase.FINISHED:
                return False
            self.logger.info(f"[session-force-end] channel={channel_id} by={requester_id} phase={session.phase.value}")
            session.bump_generation()
            if session.phase is Phase.JOINING:
                self._close(session, 'force_end', '🛑 Game cancelled.')
            else:
                self._finish(session, 'force_end')
            return True

    def state(self, channel_id: str) -> Optional[dict]:
        with self._lock:
            session = self.registry.get(channel_id)
            return session.to_dict() if session else None

    def active_channels(self):
        with self._lock:
            return self.registry.channels()

    # ---- transitions ----

    def _start(self, session: Session, rules: GameRules) -> None:
        args = (session.channel_id, session.token, session.generation)
        session.timers.countdown(
            SessionTimers.JOIN, self.join_seconds, self.join_reminders,
            self._join_reminder, self._join_timeout, *args,
        )
        session.timers.schedule(SessionTimers.WATCHDOG, self.watchdog_seconds, self._watchdog,
                                session.channel_id, session.token)
        self.logger.info(
            f"[timer-set] channel={session.channel_id} join={self.join_seconds}s watchdog={self.watchdog_seconds}s"
        )
        title = GAME_TITLES.get(session.game, session.game)
        self.notifier.send_text(
            session.channel_id,
            f"🎮 *{title}* is starting!\nJoin within {int(self.join_seconds)}s "
            f"(at least {rules.min_players} player{'s' if rules.min_players != 1 else ''} needed).",
        )
        self._publish(session)

    def _transition(self, session: Session, phase: Phase) -> None:
        """The one place a session changes phase.

        Everything scheduled for the old phase is cancelled first; the
        watchdog survives until the session leaves play.
        """
        if phase is Phase.FINISHED:
            session.timers.cancel_all()
        else:
            session.timers.cancel(SessionTimers.JOIN, SessionTimers.ROUND)
        previous = session.phase
        session.enter(phase)
        self.logger.info(f"[phase] channel={session.channel_id} {previous.value} -> {phase.value}")

    def _start_round(self, session: Session) -> None:
        rules = self.rules[session.game]
        session.timers.cancel(SessionTimers.ROUND)
        if session.round >= rules.max_rounds or rules.is_over(session):
            self._finish(session, 'finished')
            return
        session.round += 1
        try:
            session.payload = rules.new_round(session)
        except ConfigurationError as exc:
            self._abort(session, exc)
            return

        completed = session.round - 1
        if completed and self.leaderboard_every and completed % self.leaderboard_every == 0:
            self.notifier.send_text(session.channel_id, format_leaderboard(session, f"Scores after {completed} rounds"))

        session.timers.countdown(
            SessionTimers.ROUND, session.payload.duration, self.round_reminders,
            self._round_reminder, self._round_timeout,
            session.channel_id, session.token, session.generation,
        )
        self.logger.info(
            f"[round-start] channel={session.channel_id} round={session.round} "
            f"generation={session.generation} duration={session.payload.duration}s"
        )
        text, mentions = rules.prompt(session)
        self.notifier.send_text(session.channel_id, text, mentions)
        self._publish(session)

    def _accept(self, session: Session, rules: GameRules, player_id: str, verdict: Verdict,
                message_ref: Optional[str]) -> str:
        session.timers.cancel(SessionTimers.ROUND)
        session.bump_generation()
        confirmation = rules.accept(session, player_id, verdict)
        session.payload = None
        self.notifier.send_reaction(session.channel_id, message_ref, '✅')
        self.notifier.send_text(session.channel_id, confirmation, [player_id])
        self._schedule_next_round(session, rules)
        return 'accepted'

    def _reject(self, session: Session, player_id: str, verdict: Verdict, message_ref: Optional[str]) -> None:
        self.notifier.send_reaction(session.channel_id, message_ref, '❌')
        if verdict.message:
            self.notifier.send_text(session.channel_id, verdict.message, [player_id])

    def _schedule_next_round(self, session: Session, rules: GameRules) -> None:
        session.timers.schedule(
            SessionTimers.ROUND, rules.grace, self._next_round,
            session.channel_id, session.token, session.generation,
        )
        self._publish(session)

    def _finish(self, session: Session, outcome: str) -> None:
        rules = self.rules[session.game]
        self._transition(session, Phase.FINISHED)
        session.outcome = outcome
        session.winner_id = rules.winner(session)
        session.payload = None
        self.registry.remove(session.channel_id, session)
        self.logger.info(
            f"[session-finish] channel={session.channel_id} outcome={outcome} "
            f"rounds={session.round} winner={session.winner_id}"
        )
        if outcome == 'watchdog':
            self.notifier.send_text(session.channel_id, '⏱️ This game ran too long and was stopped.')
        self.notifier.send_text(session.channel_id, format_results(session, session.winner_id))
        self._publish(session)
        self._record(session)

    def _close(self, session: Session, outcome: str, message: str) -> None:
        """End a session that never produced a result (no phase change)."""
        session.timers.cancel_all()
        session.outcome = outcome
        session.payload = None
        self.registry.remove(session.channel_id, session)
        self.logger.info(f"[session-close] channel={session.channel_id} outcome={outcome} phase={session.phase.value}")
        self.notifier.send_text(session.channel_id, message)
        self._record(session)

    def _abort(self, session: Session, exc: Exception) -> None:
        self.logger.error(f"[session-abort] channel={session.channel_id} error={exc}")
        session.bump_generation()
        self._close(session, 'aborted', '⚠️ The game had to stop: word list unavailable.')

    # ---- timer callbacks ----

    def _guard(self, channel_id: str, token: str, generation: int, phase: Phase, what: str) -> Optional[Session]:
        session = self.registry.get(channel_id)
        if (session is None or session.token != token or session.phase is not phase
                or session.generation != generation):
            self.logger.debug(f"[timer-stale] channel={channel_id} what={what} generation={generation}")
            return None
        return session

    def _join_reminder(self, channel_id: str, token: str, generation: int, remaining: int) -> None:
        with self._lock:
            session = self._guard(channel_id, token, generation, Phase.JOINING, 'join-reminder')
            if session is None:
                return
            self.notifier.send_text(
                channel_id, f"⏳ {remaining}s left to join! ({len(session.players)} joined so far)"
            )

    def _join_timeout(self, channel_id: str, token: str, generation: int) -> None:
        with self._lock:
            session = self._guard(channel_id, token, generation, Phase.JOINING, 'join-timeout')
            if session is None:
                return
            rules = self.rules[session.game]
            self.logger.info(f"[timer-fire] channel={channel_id} what=join-timeout players={len(session.players)}")
            if len(session.players) < rules.min_players:
                self._close(
                    session, 'cancelled',
                    f"😴 Not enough players joined ({len(session.players)}/{rules.min_players}). Game cancelled.",
                )
                return
            session.turn_order = list(session.players)
            session.current_index = 0
            self._transition(session, Phase.PLAYING)
            names = ', '.join(p.name for p in session.players.values())
            self.notifier.send_text(channel_id, f"🚀 Let's go! Players: {names}", list(session.players))
            self._start_round(session)

    def _round_reminder(self, channel_id: str, token: str, generation: int, remaining: int) -> None:
        with self._lock:
            session = self._guard(channel_id, token, generation, Phase.PLAYING, 'round-reminder')
            if session is None:
                return
            mentions = [session.current_player_id] if session.turn_based else []
            self.notifier.send_text(channel_id, f"⏳ {remaining}s left!", mentions)

    def _round_timeout(self, channel_id: str, token: str, generation: int) -> None:
        with self._lock:
            session = self._guard(channel_id, token, generation, Phase.PLAYING, 'round-timeout')
            if session is None:
                return
            rules = self.rules[session.game]
            self.logger.info(f"[timer-fire] channel={channel_id} what=round-timeout round={session.round}")
            session.timers.cancel(SessionTimers.ROUND)
            text = rules.timeout(session)
            session.bump_generation()
            session.payload = None
            self.notifier.send_text(channel_id, text)
            if rules.is_over(session):
                self._finish(session, 'finished')
                return
            self._schedule_next_round(session, rules)

    def _next_round(self, channel_id: str, token: str, generation: int) -> None:
        with self._lock:
            session = self._guard(channel_id, token, generation, Phase.PLAYING, 'next-round')
            if session is None:
                return
            self._start_round(session)

    def _watchdog(self, channel_id: str, token: str) -> None:
        # Keyed on token only, not generation: every round bumps the generation,
        # so a generation check here would make the watchdog unable to ever fire.
        with self._lock:
            session = self.registry.get(channel_id)
            if session is None or session.token != token or session.phase is Phase.FINISHED:
                self.logger.debug(f"[timer-stale] channel={channel_id} what=watchdog")
                return
            self.logger.warning(f"[timer-fire] channel={channel_id} what=watchdog phase={session.phase.value}")
            session.bump_generation()
            if session.phase is Phase.JOINING:
                self._close(session, 'watchdog', '⏱️ This game ran too long and was stopped.')
            else:
                self._finish(session, 'watchdog')

    # ---- side channels ----

    def _publish(self, session: Session) -> None:
        self.notifier.send_state(session.channel_id, session.to_dict())

    def _record(self, session: Session) -> None:
        if self.on_finished is None:
            return
        try:
            self.on_finished(summarize(session, self.clock.now()))
        except Exception:
            self.logger.exception(f"[record-failed] channel={session.channel_id}")
