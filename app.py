from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="FactoryFlow", page_icon="🏭", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🏭_Production_Entry.py", title="Production Entry", icon="🏭"),
    st.Page("pages/2_📦_Finished_Goods.py", title="Finished Goods", icon="📦"),
    st.Page("pages/3_🧰_Packing_Stock.py", title="Packing Stock", icon="🧰"),
    st.Page("pages/4_🧱_Raw_Materials.py", title="Raw Materials", icon="🧱"),
    st.Page("pages/5_🚚_Dispatch_Assistant.py", title="Dispatch Assistant", icon="🚚"),
    st.Page("pages/6_🛒_Sales_Orders.py", title="Sales Orders", icon="🛒"),
    st.Page("pages/7_📊_Dashboard.py", title="Dashboard & Planning", icon="📊"),
    st.Page("pages/8_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
