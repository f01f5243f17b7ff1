import streamlit as st
from goonline.app import routing, state
from goonline.utils.errors import AuthError, ui_error_boundary
from goonline.utils.typing import Role

ACCOUNT_TYPES = {
    Role.OWNER: "Business Owner",
    Role.AGENT: "Agent",
    Role.VIEWER: "Viewer",
}

@ui_error_boundary
def render() -> None:
    st.title("GoOnline")
    st.caption("Simple. Scalable. Collaborative.")
    st.subheader("Create Account")

    store = state.get_session_store()
    with st.form(key="sign_up_form"):
        full_name = st.text_input("Full Name", placeholder="John Doe")
        email = st.text_input("Email Address", placeholder="you@example.com")
        password = st.text_input("Password", type="password",
                                 help=f"At least {store.min_password_length} characters")
        role = st.selectbox("Account Type", list(ACCOUNT_TYPES), format_func=ACCOUNT_TYPES.get)
        submit = st.form_submit_button("Sign Up", type="primary", use_container_width=True)

    if submit:
        try:
            with st.spinner("Creating account..."):
                store.sign_up(email, password, full_name, role)
        except AuthError as e:
            st.error(str(e) or "Failed to create account")
        else:
            routing.set_view(routing.MARKETPLACE)
            st.rerun()

    st.markdown("---")
    if st.button("Already have an account? Sign in", key="to_sign_in"):
        routing.set_view(routing.SIGN_IN)
        st.rerun()
