import streamlit as st
from goonline.app import routing, state
from goonline.utils.errors import AuthError, ui_error_boundary

@ui_error_boundary
def render() -> None:
    st.title("GoOnline")
    st.caption("Simple. Scalable. Collaborative.")
    st.subheader("Sign In")

    with st.form(key="sign_in_form"):
        email = st.text_input("Email Address", placeholder="you@example.com")
        password = st.text_input("Password", type="password")
        submit = st.form_submit_button("Sign In", type="primary", use_container_width=True)

    if submit:
        try:
            with st.spinner("Signing in..."):
                state.get_session_store().sign_in(email, password)
        except AuthError as e:
            st.error(str(e) or "Failed to sign in")
        else:
            routing.set_view(routing.MARKETPLACE)
            st.rerun()

    st.markdown("---")
    if st.button("Don't have an account? Sign up", key="to_sign_up"):
        routing.set_view(routing.SIGN_UP)
        st.rerun()
