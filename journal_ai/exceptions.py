"""Custom exception classes"""


class JournalException(Exception):
    """Base exception for the journal backend"""
    pass


class ConfigurationException(JournalException):
    """Invalid backend or provider configuration"""
    pass


class StorageException(JournalException):
    """Embedding store I/O errors"""
    pass


class EmbeddingProviderException(JournalException):
    """External embedding API errors"""
    pass


class LLMException(JournalException):
    """Chat generation errors"""
    pass


class VaultException(JournalException):
    """Vault file read/write errors"""
    pass


class SessionNotFoundException(JournalException):
    """Unknown dictation session"""
    pass


class TranscriptionException(JournalException):
    """Speech-to-text errors"""
    pass
