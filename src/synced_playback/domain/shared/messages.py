"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Queue Validation Errors
    INVALID_QUEUE_POSITION = "Queue position cannot be negative"
    TRACKS_REQUIRED = "Require at least a track"
    TRACK_NOT_FOUND = "Track {track_id} does not exist"
    TRACK_TOO_LONG = "Track {track_id} is longer than the maximum allowed duration"

    # Playback
    PLAYBACK_ADVANCE_FAILED = "Couldn't advance playback"
    NOTHING_PLAYING = "Nothing is currently playing"
    QUEUE_UID_UNRESOLVED = "queue uid is missing at index {index}"
    QUEUE_INDEX_UNRESOLVED = "queue index is missing for uid {uid}"
    QUEUE_ITEM_UNRESOLVED = "queue item data is missing for uid {uid}"
    TRACK_UNRESOLVED = "track {track_id} could not be resolved"

    # Reactions
    REACTION_NOT_ALLOWED = "Reaction not allowed"

    # Sessions
    SESSION_NOT_LIVE = "Session is no longer live"
    NOT_COLLABORATOR = "make changes to this session"
    NOT_CREATOR = "end this session"
    INVITE_NOT_ALLOWED = "get the invite link of this session"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_REDIS_URL = "Redis URL must start with redis://, rediss:// or unix://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Worker Lifecycle
    WORKER_STARTING = "Starting playback worker (environment=%s)"
    WORKER_STOPPED = "Playback worker stopped"
    WORKER_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down"
    WORKER_FATAL_ERROR = "Fatal error: %s"
    WORKER_SIGNAL_RECEIVED = "Received %s, stopping worker"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Coordination Store
    REDIS_CONNECTED = "Connected to coordination store at %s"
    REDIS_CLOSED = "Coordination store client closed"

    # Skip Scheduler
    SKIP_SCHEDULER_STARTED = "Skip scheduler started (interval=%sms)"
    SKIP_SCHEDULER_STOPPED = "Skip scheduler stopped"
    SKIP_SCHEDULER_ALREADY_RUNNING = "Skip scheduler is already running"
    SKIP_SCHEDULER_TICK_FAILED = "Skip scheduler tick failed"
    SKIP_JOB_TRIGGERED = "Skip job triggered for session %s"
    SKIP_JOB_ALREADY_HANDLED = "Skip job for session %s was handled elsewhere"
    SKIP_JOB_DONE = "Skip job done for session %s"
    SKIP_JOB_FAILED = "Skip job failed for session %s; retrying on the next tick"
    CLAIM_CONTENDED = "Claim on %s gave up after %s contended attempts"
    SKIP_ARMED = "Armed track end for session %s at %s"

    # Command Channel
    COMMAND_LISTENER_STARTED = "Listening for playback commands on %s"
    COMMAND_LISTENER_STOPPED = "Playback command listener stopped"
    COMMAND_LISTENER_FAILED = "Playback command listener failed, resubscribing"
    COMMAND_RECEIVED = "Received %s command for session %s"
    COMMAND_INVALID = "Dropping malformed playback command: %r"
    COMMAND_PUBLISHED = "Published %s command for session %s"

    # Transitions
    TRANSITION_FAILED = "Transition %s failed for session %s: %s"
    TRANSITION_NO_STATE = "No now-playing state for session %s, ignoring %s"
    NOW_PLAYING_SET = "Session %s now playing index=%s uid=%s until %s"
    NOW_PLAYING_REMOVED = "Removed now-playing state for session %s"

    # Session-End Scheduler
    SESSION_END_SCHEDULER_STARTED = "Session-end scheduler started (interval=%ss)"
    SESSION_END_SCHEDULER_STOPPED = "Session-end scheduler stopped"
    SESSION_END_SCHEDULER_ALREADY_RUNNING = "Session-end scheduler is already running"
    SESSION_END_TICK_FAILED = "Session-end scheduler tick failed"
    SESSION_END_TRIGGERED = "Session end triggered for %s"
    SESSION_END_FAILED = "Failed to end session %s"
    SESSION_ENDED = "Ended session %s (archived %s tracks)"
    SESSION_ALREADY_ENDED = "Session %s was already ended"
    SESSION_CREATED = "Created session %s for creator %s with %s tracks"
    SESSION_DEADLINE_REFRESHED = "Session %s deadline moved to %s"

    # Presence & Reactions
    LISTENER_JOINED = "User %s joined session %s"
    REACTION_SET = "User %s reacted %s in session %s"

    # Queue
    QUEUE_PUSHED = "Pushed %s items to queue of session %s"

    # Events
    EVENT_PUBLISHED = "Published %s to %s (%s subscribers)"

    # Repository Operations
    SESSION_SAVED = "Saved session %s"
    TRACK_SAVED = "Saved track %s"
