import functools, traceback
import streamlit as st
from goonline.utils.logging import logger

class GoOnlineError(Exception): ...
class ConfigError(GoOnlineError): ...
class AuthError(GoOnlineError): ...
class ValidationError(GoOnlineError): ...
class NotFoundError(GoOnlineError): ...
class AuthzError(GoOnlineError): ...
class DataError(GoOnlineError): ...

def user_message(e: Exception) -> str:
    """Message safe to show inline in place of data or on a form."""
    text = str(e).strip()
    if isinstance(e, GoOnlineError) and text:
        return text
    return "Something went wrong. Please try again."

def ui_error_boundary(fn):
    @functools.wraps(fn)
    def _wrap(*a, **k):
        try:
            return fn(*a, **k)
        except Exception as e:
            # st.stop / st.rerun signal via exceptions and must pass through
            if type(e).__module__.startswith("streamlit"):
                raise
            logger.error("UI error in %s: %s", fn.__name__, e, exc_info=True)
            st.error("Unexpected error. See details below.")
            with st.expander("Error details"):
                st.code("".join(traceback.format_exception(type(e), e, e.__traceback__)))
    return _wrap

def handle_fatal(e: Exception) -> None:
    logger.critical("Fatal error: %s", e, exc_info=True)
    st.error("Critical error, the application cannot continue.")
    st.stop()
