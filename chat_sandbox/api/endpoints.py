class ENDPOINTS:
    MODELS = "/models"
    SESSIONS = "/sessions"
    SESSION_ITEM = "/sessions/{session_uuid}"
    SESSION_MESSAGES = "/sessions/{session_uuid}/messages"
    SESSION_RAW_MESSAGES = "/sessions/{session_uuid}/raw-messages"
    SESSION_STATS = "/sessions/{session_uuid}/stats"
    SESSION_SETTINGS = "/sessions/{session_uuid}/settings"
    SESSION_SYSTEM_PROMPT = "/sessions/{session_uuid}/system-prompt"
    SESSION_TEST_MESSAGE = "/sessions/{session_uuid}/test-message"
    COMPRESSION_VERIFY_KEY = "/compression/verify-key"

    PREFIX = "/v1"

    def session(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_ITEM.format(session_uuid=session_uuid)

    def session_messages(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_MESSAGES.format(session_uuid=session_uuid)

    def session_raw_messages(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_RAW_MESSAGES.format(session_uuid=session_uuid)

    def session_stats(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_STATS.format(session_uuid=session_uuid)

    def session_settings(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_SETTINGS.format(session_uuid=session_uuid)

    def session_system_prompt(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_SYSTEM_PROMPT.format(session_uuid=session_uuid)

    def session_test_message(self, session_uuid) -> str:
        return self.PREFIX + self.SESSION_TEST_MESSAGE.format(session_uuid=session_uuid)

    def sessions(self) -> str:
        return self.PREFIX + self.SESSIONS

    def models(self) -> str:
        return self.PREFIX + self.MODELS

    def compression_verify_key(self) -> str:
        return self.PREFIX + self.COMPRESSION_VERIFY_KEY
