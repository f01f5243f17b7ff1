import streamlit as st
from goonline.utils.typing import BusinessListing, ListingStatus

STATUS_BADGES = {
    ListingStatus.ACTIVE: "🟢 active",
    ListingStatus.PENDING: "🟡 pending",
    ListingStatus.SUSPENDED: "🔴 suspended",
}

def render_public(listing: BusinessListing) -> None:
    """Marketplace card: logo, category, description, owner and contact links."""
    with st.container(border=True):
        if listing.logo_url:
            st.image(listing.logo_url, use_container_width=True)
        else:
            st.markdown(f"## {listing.name[:1].upper()}")

        col1, col2 = st.columns([3, 1])
        with col1:
            st.subheader(listing.name)
        with col2:
            st.caption(listing.category)

        st.write(listing.description or "No description available")
        if listing.location:
            st.caption(f"📍 {listing.location}")
        if listing.owner_name:
            st.caption(f"By {listing.owner_name}")

        links = []
        if listing.contact_email:
            links.append(f"[Contact](mailto:{listing.contact_email})")
        if listing.contact_phone:
            links.append(f"[Call](tel:{listing.contact_phone})")
        if links:
            st.markdown(" · ".join(links))

def render_owned(listing: BusinessListing, key_prefix: str = "owned") -> str:
    """Dashboard card. Returns "edit", "delete" or "" for the clicked action."""
    action = ""
    with st.container(border=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.subheader(listing.name)
        with col2:
            st.caption(STATUS_BADGES.get(listing.status, listing.status.value))

        st.caption(listing.category)
        st.write(listing.description or "No description")
        if listing.location:
            st.caption(f"📍 {listing.location}")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✏️ Edit", key=f"{key_prefix}_edit_{listing.id}", use_container_width=True):
                action = "edit"
        with col2:
            if st.button("🗑️ Delete", key=f"{key_prefix}_delete_{listing.id}", use_container_width=True):
                action = "delete"
    return action
