import streamlit as st

# Hierarchical menu: a value of None is a single page, a list a submenu
menu_structure = {
    "🏠 Home": None,
    "🔬 Models": ["Competition (Chemostat)"],
    "⚙️ Control": {
        "Optimal": ["Singular Arc (Crank-Nicolson)"]
    }
}


def main():
    st.set_page_config(page_title="Chemostat Competition Control", layout="wide")

    st.sidebar.title("Main Navigation")

    main_category = st.sidebar.selectbox(
        "Select a section:",
        list(menu_structure.keys()),
        key="main_cat_select"
    )

    sub_options = menu_structure[main_category]
    selected_page = main_category

    if isinstance(sub_options, list):
        st.sidebar.markdown("---")
        selected_page = st.sidebar.radio(
            f"Detail - {main_category.split(' ')[-1]}:",
            sub_options,
            key=f"radio_sub_{main_category.replace(' ', '_')}"
        )

    elif isinstance(sub_options, dict):
        st.sidebar.markdown("---")
        sub_level1_selection = st.sidebar.selectbox(
            f"Type - {main_category.split(' ')[-1]}:",
            list(sub_options.keys()),
            key=f"select_sub1_{main_category.replace(' ', '_')}"
        )

        sub_level2_options = sub_options[sub_level1_selection]
        if sub_level2_options:
            st.sidebar.markdown("---")
            selected_page = st.sidebar.radio(
                f"Option - {sub_level1_selection}:",
                sub_level2_options,
                key=f"radio_sub2_{main_category.replace(' ', '_')}_{sub_level1_selection}"
            )

    st.subheader(f"Selected Page: {selected_page}")
    st.markdown("---")

    try:
        if selected_page == "🏠 Home":
            from Body import home
            home.home_page()
        elif selected_page == "Competition (Chemostat)":
            from Body.modeling import competition
            competition.competition_page()
        elif selected_page == "Singular Arc (Crank-Nicolson)":
            from Body.control.avanzado import singular_arc
            singular_arc.singular_arc_page()
        else:
            st.warning(f"'{selected_page}' page selected, but no specific loader found. Displaying Home.")
            from Body import home
            home.home_page()

    except ModuleNotFoundError as e:
        st.error(f"Error importing the module for '{selected_page}': {e}")
        st.info("Displaying Home Page as a fallback.")
        from Body import home
        home.home_page()


if __name__ == "__main__":
    main()
