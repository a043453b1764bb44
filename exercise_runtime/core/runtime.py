# exercise_runtime/core/runtime.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Union

from exercise_runtime.core.definition import ExerciseDefinition, SelectionMode
from exercise_runtime.core.errors import (
    InitializationError,
    ListenerError,
    PluginError,
    TransitionError,
    ValidationError,
)
from exercise_runtime.core.events import (
    AnswerSubmittedPayload,
    CompletedPayload,
    ErrorPayload,
    Event,
    EventBus,
    EventKind,
    EventListener,
    HintPayload,
    InteractionPayload,
    LifecyclePayload,
    PlaybackPayload,
    StateChangePayload,
    TimePayload,
)
from exercise_runtime.core.lifecycle import LifecycleMachine
from exercise_runtime.core.state import (
    AnswerRecord,
    CompletionReason,
    ContentProjection,
    ErrorInfo,
    ExerciseResults,
    Feedback,
    FeedbackKind,
    LifecycleState,
    RuntimeState,
    ValidationResult,
)
from exercise_runtime.core.validation import DefinitionValidator
from exercise_runtime.interfaces.protocols import (
    AccessibilityAnnouncer,
    AnalyticsSink,
    AudioSpeaker,
    ExerciseVariant,
    Localizer,
    MediaLoader,
    SchemaValidator,
)
from exercise_runtime.interfaces.types import Answer, Clock, OptionID
from exercise_runtime.runtime.collaborators import LoggingAnalytics, LoggingAnnouncer, SilentSpeaker
from exercise_runtime.runtime.input import KeyBindings, default_shortcuts
from exercise_runtime.runtime.localization import CatalogLocalizer
from exercise_runtime.runtime.playback import PlaybackChannel
from exercise_runtime.runtime.plugins import PluginHost
from exercise_runtime.runtime.timers import ExerciseTimer
from exercise_runtime.variants.registry import VariantRegistry, default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Host-level runtime settings. Per-exercise behaviour lives in the
    definition's ExerciseSettings.

    :param language: Language handed to the default localizer.
    :param tick_interval: Seconds per timer tick. time_limit, time_elapsed and
        time_remaining count ticks; total_time is in clock seconds.
    :param auto_tick: Drive the timer from the event loop; when False the host calls timer.tick().
    :param strict_validation: Block initialization when the definition fails schema validation.
    :param fatal_media_errors: Block initialization when media preloading fails.
    :param time_warning_threshold: Fraction of the time limit after which a warning is emitted, or None.
    :param enable_keyboard: Attach the default keyboard shortcuts on initialize.
    :param playback_pause: Seconds between items when playing all options.
    :param speech_rate: Rate passed to the speaker.
    """

    language: str = "en"
    tick_interval: float = 1.0
    auto_tick: bool = True
    strict_validation: bool = False
    fatal_media_errors: bool = False
    time_warning_threshold: Optional[float] = 0.8
    enable_keyboard: bool = True
    playback_pause: float = 0.5
    speech_rate: float = 0.8


class ExerciseRuntime:
    """
    Presentation-agnostic engine running one exercise from creation to
    destruction.

    The runtime owns the lifecycle, the run state, the event bus, the timer,
    the plugin host and the playback lock. Everything answer-shaped is
    delegated to the injected ExerciseVariant. Errors raised by variants,
    listeners, plugins and collaborators are caught, stored in
    ``state.error`` and published as ERROR events.
    """

    def __init__(
        self,
        definition: ExerciseDefinition,
        config: Optional[RuntimeConfig] = None,
        variant: Optional[ExerciseVariant] = None,
        *,
        validator: Optional[SchemaValidator] = None,
        localizer: Optional[Localizer] = None,
        announcer: Optional[AccessibilityAnnouncer] = None,
        analytics: Optional[AnalyticsSink] = None,
        media_loader: Optional[MediaLoader] = None,
        speaker: Optional[AudioSpeaker] = None,
        registry: Optional[VariantRegistry] = None,
        clock: Optional[Clock] = None,
        hooks: Optional[List] = None,
    ) -> None:
        """
        :param definition: Normalized, immutable exercise definition.
        :param config: Runtime settings.
        :param variant: Variant capability; resolved from ``registry`` when omitted.
        :param hooks: Optional lifecycle hooks implementing on_enter/on_exit/on_error.
        :raises ValueError: If no variant is given and none is registered for the definition type.
        """
        self._definition = definition
        self._config = config or RuntimeConfig()
        self._clock = clock or time.time
        self._validator = validator or DefinitionValidator()
        self._localizer = localizer or CatalogLocalizer(self._config.language)
        self._announcer = announcer or LoggingAnnouncer()
        self._analytics = analytics or LoggingAnalytics()
        self._media_loader = media_loader
        self._variant = variant or (registry or default_registry()).create(definition, self._localizer)

        self._bus = EventBus(clock=self._clock, on_listener_error=self._on_listener_error)
        self._lifecycle = LifecycleMachine(hooks=hooks)
        self._plugins = PluginHost(on_error=self._on_plugin_error)
        self._timer = ExerciseTimer(self._on_tick, self._config.tick_interval)
        self._playback = PlaybackChannel(
            speaker or SilentSpeaker(),
            pause=self._config.playback_pause,
            on_start=self._on_playback_start,
            on_end=self._on_playback_end,
            on_error=lambda e: self.handle_error("playback", e),
        )
        self._keys = KeyBindings(default_shortcuts(self))

        self._state = self._fresh_state(LifecycleState.UNINITIALIZED)
        self._initialized = False
        self._destroyed = False
        self._handling_error = False
        # Bumped by reset(); submissions started in an earlier run are dropped.
        self._run = 0

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._definition.id

    @property
    def definition(self) -> ExerciseDefinition:
        return self._definition

    @property
    def variant(self) -> ExerciseVariant:
        return self._variant

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    @property
    def lifecycle(self) -> LifecycleState:
        """Get the current lifecycle state."""
        return self._lifecycle.current_state

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def timer(self) -> ExerciseTimer:
        return self._timer

    @property
    def playback(self) -> PlaybackChannel:
        return self._playback

    @property
    def key_bindings(self) -> KeyBindings:
        return self._keys

    @property
    def localizer(self) -> Localizer:
        return self._localizer

    def get_state(self) -> RuntimeState:
        """Immutable snapshot of the current run state."""
        return self._state

    def get_content(self, include_solution: bool = False) -> ContentProjection:
        return self._variant.project_content(include_solution)

    def get_results(self) -> ExerciseResults:
        state = self._state
        return ExerciseResults(
            exercise_id=self.id,
            exercise_type=self._variant.get_type(),
            score=state.score,
            accuracy=state.accuracy,
            total_time=state.total_time,
            attempts=state.attempts,
            hints_used=state.hints_used,
            completed=state.completed,
            completion_reason=state.completion_reason,
            answers=tuple(record.answer for record in state.answer_history),
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Validate the definition, preload media, bind key handlers, start the
        timer and plugins, and open the analytics session. No-op once
        initialized or destroyed.

        :raises InitializationError: On a hard failure (strict schema mode or
            fatal media errors). The runtime returns to UNINITIALIZED.
        """
        if self._initialized or self._destroyed or not self._lifecycle.is_in(LifecycleState.UNINITIALIZED):
            return

        if not self._move(LifecycleState.INITIALIZING):
            return
        try:
            self._validate_schema()
            await self._load_media()
        except InitializationError as e:
            if self._destroyed:
                return
            self.handle_error("initialization", e)
            self._move(LifecycleState.UNINITIALIZED)
            raise

        if self._destroyed:
            logger.debug("Runtime %s destroyed while initializing", self.id)
            return

        if self._config.enable_keyboard:
            self._keys.attach()
        if self._config.auto_tick:
            self._timer.start()

        self._initialized = True
        self._plugins.initialize_all(self)
        self._track(
            "exercise_started",
            {"exerciseType": self._variant.get_type(), "timestamp": self._clock()},
        )
        if not self._move(LifecycleState.READY):
            return
        self._emit_lifecycle(EventKind.INITIALIZED)

    def start(self) -> None:
        """Begin the run. Only valid from READY."""
        if not self._lifecycle.is_in(LifecycleState.READY):
            return
        if not self._move(LifecycleState.RUNNING, started=True, start_time=self._clock()):
            return
        self._emit_lifecycle(EventKind.STARTED)
        self._announce(self.translate("accessibility.exerciseStarted"))

    def pause(self) -> None:
        if not self._lifecycle.is_in(LifecycleState.RUNNING):
            return
        if not self._move(LifecycleState.PAUSED, paused=True):
            return
        self._emit_lifecycle(EventKind.PAUSED)

    def resume(self) -> None:
        if not self._lifecycle.is_in(LifecycleState.PAUSED):
            return
        if not self._move(LifecycleState.RUNNING, paused=False):
            return
        self._emit_lifecycle(EventKind.RESUMED)

    def reset(self) -> None:
        """
        Start over with a fresh run state. Plugins and listeners are kept.

        A submission still in flight is discarded when it resolves, and any
        playback stops before its next item.
        """
        if self._destroyed or self._lifecycle.is_in(LifecycleState.INITIALIZING):
            return

        self._run += 1
        fresh = self._fresh_state(self._lifecycle.current_state)
        if self._playback.busy:
            self._playback.cancel()
            # The lock is held until the speaker returns; on_end clears these.
            fresh = replace(fresh, is_playing_audio=True, currently_playing=self._state.currently_playing)
        if self._initialized and not self._lifecycle.is_in(LifecycleState.READY):
            self._transition(LifecycleState.READY)

        self._set_state(replace(fresh, lifecycle=self._lifecycle.current_state), {"reset": True})
        self._emit_lifecycle(EventKind.RESET)
        self._announce(self.translate("accessibility.exerciseReset"))

    def complete(self) -> None:
        """Finish the run as answer-driven completion. Idempotent."""
        if self._destroyed or self._state.completed:
            return
        self._mark_completed(CompletionReason.ANSWERED)
        self._publish_completion(CompletionReason.ANSWERED)

    def handle_time_up(self) -> None:
        """Force-complete the run because time ran out. Fires once per run."""
        if self._destroyed or self._state.completed:
            return
        self._mark_completed(CompletionReason.TIME_UP)
        self._announce(self.translate("errors.timeUp"), "assertive")
        self._bus.emit(EventKind.TIME_UP, TimePayload(self._state.time_elapsed, self._state.time_remaining))
        self._publish_completion(CompletionReason.TIME_UP)

    def destroy(self) -> None:
        """
        Tear everything down: timer, playback, key handlers, plugins and
        listeners. Idempotent. In-flight submissions discard their result.
        """
        if self._destroyed:
            return
        self._destroyed = True

        self._timer.stop()
        self._playback.close()
        self._keys.detach()
        self._plugins.destroy_all()

        try:
            self._transition(LifecycleState.DESTROYED)
            self._update_state(lifecycle=self._lifecycle.current_state, loading=False)
            self._emit_lifecycle(EventKind.DESTROYED)
        finally:
            self._bus.clear()

    # -------------------------------------------------------------------------
    # Interaction
    # -------------------------------------------------------------------------

    def select_option(self, option_id: OptionID) -> bool:
        """
        Toggle ``option_id`` in the selection.

        Single mode replaces the previous selection. Multiple mode refuses
        additions beyond ``required_selections`` without changing state or
        emitting anything. Deselection is always allowed.

        :return: True if the selection changed.
        """
        if self._destroyed or self._state.completed:
            return False
        if option_id not in self._definition.content.option_ids():
            logger.warning("Ignoring selection of unknown option %r", option_id)
            return False

        settings = self._definition.settings
        selected = list(self._state.selected_answers)
        if option_id in selected:
            selected.remove(option_id)
            now_selected = False
        elif settings.selection_mode is SelectionMode.SINGLE:
            selected = [option_id]
            now_selected = True
        elif len(selected) >= settings.required_selections:
            return False
        else:
            selected.append(option_id)
            now_selected = True

        self._update_state(selected_answers=tuple(selected))
        key = "accessibility.optionSelected" if now_selected else "accessibility.optionDeselected"
        self._announce(self.translate(key))
        self._track(
            "user_interaction",
            {"interactionType": "option_select", "option": option_id, "selected": now_selected},
        )
        self._bus.emit(
            EventKind.USER_INTERACTION,
            InteractionPayload(
                type="option_select",
                option=option_id,
                selected=now_selected,
                total_selected=len(selected),
            ),
        )
        return True

    def select_option_at(self, index: int) -> bool:
        """Toggle the option at ``index`` in declaration order."""
        option_ids = self._definition.content.option_ids()
        if not 0 <= index < len(option_ids):
            return False
        return self.select_option(option_ids[index])

    async def submit_answer(self, answer: Optional[Answer] = None) -> Optional[ValidationResult]:
        """
        Validate and score an answer (defaults to the current selection).

        No-op while loading, after completion and after destroy.

        :return: The ValidationResult, or None if nothing was recorded.
        """
        if self._destroyed or self._state.completed or self._state.loading:
            return None

        run = self._run
        self._update_state(loading=True)
        try:
            resolved = answer if answer is not None else self._variant.get_current_answer(self._state)
            validation = await self._call_variant(self._variant.validate_answer, resolved)
            score = await self._call_variant(self._variant.calculate_score, resolved)
            if self._destroyed or run != self._run:
                logger.debug("Discarding submission from a finished run of %s", self.id)
                return None
            if not 0 <= score <= 100:
                raise ValidationError("Score out of range", {"score": score})
            self._record_submission(validation, score)
            return validation
        except Exception as e:
            if not self._destroyed and run == self._run:
                self.handle_error("answer_submission", e)
            return None
        finally:
            if run == self._run and self._state.loading:
                self._update_state(loading=False)

    def show_hint(self) -> Optional[str]:
        """
        Reveal the next unused hint.

        :return: The hint text, or None once hints are exhausted.
        """
        if self._destroyed:
            return None
        hints = self._definition.solution.hints
        index = self._state.hints_used
        if index >= len(hints):
            return None

        text = self._localizer.localize(hints[index])
        self._update_state(hints_used=index + 1, current_hint=text)
        self._announce(text)
        self._track("hint_used", {"hintIndex": index, "hintText": text})
        self._bus.emit(EventKind.HINT_SHOWN, HintPayload(index=index, text=text))
        return text

    def can_submit(self) -> bool:
        if self._destroyed or self._state.completed or self._state.loading:
            return False
        answer = self._variant.get_current_answer(self._state)
        is_complete = getattr(self._variant, "is_answer_complete", None)
        if is_complete is None:
            return len(answer) > 0
        return is_complete(answer)

    def selection_count_text(self) -> str:
        return self.translate(
            "exerciseTypes.multipleAnswers.selectionCount",
            {
                "selected": len(self._state.selected_answers),
                "required": self._definition.settings.required_selections,
            },
        )

    def handle_key(self, key: str, ctrl: bool = False, alt: bool = False, meta: bool = False) -> bool:
        """Dispatch a key press to the bound shortcut. Returns True if consumed."""
        return self._keys.handle(key, ctrl=ctrl, alt=alt, meta=meta)

    async def play_option_audio(self, option_id: OptionID) -> bool:
        """Speak one option. Rejected (False) while another playback holds the lock."""
        play = getattr(self._variant, "play_option", None)
        if self._destroyed or play is None:
            return False
        return await play(self._playback, option_id, self._speech_options())

    async def play_all_audio(self) -> bool:
        """Speak every option. Rejected (False) while another playback holds the lock."""
        play = getattr(self._variant, "play_all", None)
        if self._destroyed or play is None:
            return False
        return await play(self._playback, self._speech_options())

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on(self, kind: Union[EventKind, str], listener: EventListener) -> None:
        self._bus.on(kind, listener)

    def off(self, kind: Union[EventKind, str], listener: EventListener) -> bool:
        return self._bus.off(kind, listener)

    def emit(self, kind: Union[EventKind, str], payload: Any) -> Event:
        return self._bus.emit(kind, payload)

    # -------------------------------------------------------------------------
    # Plugins
    # -------------------------------------------------------------------------

    def register_plugin(self, name: str, plugin: Any) -> None:
        """Register a plugin; it is initialized now if the runtime already is, else on initialize()."""
        ready = self._initialized and not self._destroyed
        self._plugins.register(name, plugin, self if ready else None)

    def unregister_plugin(self, name: str) -> bool:
        return self._plugins.unregister(name)

    def get_plugin(self, name: str) -> Optional[Any]:
        return self._plugins.get(name)

    # -------------------------------------------------------------------------
    # Errors and collaborators
    # -------------------------------------------------------------------------

    def handle_error(self, context: str, error: Exception) -> None:
        """Record ``error`` in state.error and publish it as an ERROR event."""
        info = ErrorInfo(context=context, message=str(error), timestamp=self._clock())
        logger.error("Error in %s: %s", context, info.message, exc_info=error)
        self._handling_error = True
        try:
            self._update_state(error=info)
            self._bus.emit(EventKind.ERROR, ErrorPayload(info.context, info.message, info.timestamp))
        finally:
            self._handling_error = False

    def translate(self, key: str, params: Optional[Dict[str, Any]] = None) -> str:
        return self._localizer.translate(key, params)

    def localize(self, text: Any) -> str:
        return self._localizer.localize(text)

    def _on_listener_error(self, event: Event, error: ListenerError) -> None:
        if self._handling_error or event.kind is EventKind.ERROR:
            return
        self.handle_error(f"listener:{event.kind.value}", error)

    def _on_plugin_error(self, error: PluginError) -> None:
        self.handle_error(f"plugin:{error.plugin_name}", error)

    def _announce(self, message: str, priority: str = "polite") -> None:
        try:
            self._announcer.announce(message, priority)
        except Exception:
            logger.exception("Accessibility announcer failed")

    def _track(self, name: str, payload: Dict[str, Any]) -> None:
        try:
            self._analytics.track_event(name, {"exerciseId": self.id, **payload})
        except Exception:
            logger.exception("Analytics sink failed for %s", name)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _fresh_state(self, lifecycle: LifecycleState) -> RuntimeState:
        return RuntimeState(lifecycle=lifecycle, time_remaining=self._definition.settings.time_limit)

    def _set_state(self, new_state: RuntimeState, updates: Dict[str, Any]) -> None:
        old_state = self._state
        self._state = new_state
        self._bus.emit(EventKind.STATE_CHANGE, StateChangePayload(old_state, new_state, updates))

    def _update_state(self, **updates: Any) -> None:
        self._set_state(replace(self._state, **updates), updates)

    def _transition(self, target: LifecycleState) -> bool:
        """
        Move the lifecycle machine, reporting hook failures as errors.

        A hook failing in on_exit leaves the machine where it was; one failing
        in on_enter does not undo the move.

        :return: True if the machine is in ``target`` afterwards.
        """
        try:
            self._lifecycle.transition(target)
        except TransitionError:
            raise
        except Exception as e:
            self.handle_error("lifecycle_hook", e)
        return self._lifecycle.is_in(target)

    def _move(self, target: LifecycleState, **updates: Any) -> bool:
        if not self._transition(target):
            return False
        self._update_state(lifecycle=target, **updates)
        return True

    def _emit_lifecycle(self, kind: EventKind) -> None:
        self._bus.emit(kind, LifecyclePayload(exercise_id=self.id, lifecycle=self._lifecycle.current_state))

    def _validate_schema(self) -> None:
        strict = self._config.strict_validation
        try:
            report = self._validator.validate(self._definition)
        except Exception as e:
            if strict:
                raise InitializationError(f"Schema validator failed: {e}") from e
            logger.warning("Schema validator failed, continuing: %s", e)
            return

        for issue in report.warnings:
            logger.warning("Schema validation warning: %s", getattr(issue, "message", issue))
        if report.success:
            return
        messages = [getattr(issue, "message", str(issue)) for issue in report.errors]
        if strict:
            raise InitializationError("Schema validation failed", {"errors": messages})
        logger.warning("Schema validation failed, continuing: %s", "; ".join(messages))

    async def _load_media(self) -> None:
        references = self._definition.media_references()
        if self._media_loader is None or not references:
            return
        try:
            await self._media_loader.preload(references)
        except Exception as e:
            if self._config.fatal_media_errors:
                raise InitializationError(f"Failed to load media: {e}", {"references": list(references)}) from e
            logger.warning("Media preload failed, continuing: %s", e)
            self.handle_error("media_loading", e)

    async def _call_variant(self, method: Callable[[Any], Any], answer: Any) -> Any:
        if asyncio.iscoroutinefunction(method):
            return await method(answer)
        return method(answer)

    def _record_submission(self, validation: ValidationResult, score: float) -> None:
        state = self._state
        answer = tuple(validation.user_answer)
        history = state.answer_history + (AnswerRecord(answer, validation.is_correct, score, self._clock()),)
        attempts = state.attempts + 1
        correct = sum(1 for record in history if record.is_correct)
        feedback = self._feedback_for(validation)

        updates: Dict[str, Any] = {
            "answer_history": history,
            "attempts": attempts,
            "score": score,
            "accuracy": round(correct / attempts * 100),
            "last_validation": validation,
            "feedback": feedback,
            "loading": False,
        }
        reveal = not validation.is_correct and self._definition.settings.show_correct_after_mistakes
        if reveal:
            option_ids = self._definition.content.option_ids()
            updates["revealed_answer"] = tuple(i for i in option_ids if i in validation.correct_set)
        self._update_state(**updates)

        self._track(
            "answer_submitted",
            {"answer": list(answer), "correct": validation.is_correct, "score": score, "attempts": attempts},
        )
        self._announce(feedback.message)
        if reveal:
            self._announce(validation.explanation)
        self._bus.emit(
            EventKind.ANSWER_SUBMITTED,
            AnswerSubmittedPayload(answer=answer, validation=validation, score=score, attempts=attempts),
        )

        if self._completion_reached(validation, attempts):
            if not validation.is_correct:
                self._announce(self.translate("errors.tooManyAttempts"))
            self.complete()

    def _feedback_for(self, validation: ValidationResult) -> Feedback:
        if validation.is_correct:
            return Feedback(self.translate("feedback.correct"), FeedbackKind.SUCCESS)
        if validation.is_partially_correct:
            return Feedback(self.translate("feedback.partiallyCorrect"), FeedbackKind.PARTIAL)
        return Feedback(self.translate("feedback.incorrect"), FeedbackKind.ERROR)

    def _completion_reached(self, validation: ValidationResult, attempts: int) -> bool:
        settings = self._definition.settings
        if validation.is_correct or not settings.allow_multiple_attempts:
            return True
        return settings.max_attempts is not None and attempts >= settings.max_attempts

    def _mark_completed(self, reason: CompletionReason) -> None:
        now = self._clock()
        start = self._state.start_time
        updates: Dict[str, Any] = {
            "completed": True,
            "completion_reason": reason,
            "time_up": reason is CompletionReason.TIME_UP,
            "end_time": now,
            "total_time": now - start if start is not None else None,
        }
        moved = self._lifecycle.can_transition(LifecycleState.COMPLETED) and self._move(
            LifecycleState.COMPLETED, **updates
        )
        if not moved:
            self._update_state(**updates)

    def _publish_completion(self, reason: CompletionReason) -> None:
        results = self.get_results()
        self._track(
            "exercise_completed",
            {
                "totalTime": results.total_time,
                "score": results.score,
                "attempts": results.attempts,
                "hintsUsed": results.hints_used,
                "reason": reason.value,
            },
        )
        self._bus.emit(EventKind.COMPLETED, CompletedPayload(results=results, reason=reason))
        self._announce(self.translate("accessibility.exerciseCompleted"))

    def _on_tick(self) -> None:
        if self._destroyed or self._state.completed or not self._lifecycle.is_in(LifecycleState.RUNNING):
            return

        elapsed = self._state.time_elapsed + 1
        limit = self._definition.settings.time_limit
        if limit is None:
            self._update_state(time_elapsed=elapsed)
            return

        remaining = max(0, limit - elapsed)
        threshold = self._config.time_warning_threshold
        warn = (
            threshold is not None
            and not self._state.time_warning_sent
            and remaining > 0
            and elapsed >= threshold * limit
        )
        self._update_state(time_elapsed=elapsed, time_remaining=remaining, time_warning_sent=self._state.time_warning_sent or warn)
        if warn:
            self._bus.emit(EventKind.TIME_WARNING, TimePayload(elapsed, remaining))
            self._announce(self.translate("timer.warning", {"remaining": remaining}))
        if remaining <= 0:
            self.handle_time_up()

    def _speech_options(self) -> Dict[str, Any]:
        return {"rate": self._config.speech_rate, "pitch": 1, "volume": 1}

    def _on_playback_start(self, label: Optional[str], items: int) -> None:
        self._update_state(is_playing_audio=True, currently_playing=label)
        self._bus.emit(EventKind.PLAYBACK_STARTED, PlaybackPayload(option=label, items=items))

    def _on_playback_end(self, label: Optional[str], items: int) -> None:
        self._update_state(is_playing_audio=False, currently_playing=None)
        self._bus.emit(EventKind.PLAYBACK_ENDED, PlaybackPayload(option=label, items=items))
