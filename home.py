from __future__ import annotations

import streamlit as st

from factoryflow.config import get_settings
from factoryflow.db import get_conn, ensure_schema, q

st.set_page_config(page_title="FactoryFlow", page_icon="🏭", layout="wide")

st.title("🏭 FactoryFlow — Electrode Plant Operations")
st.caption(
    "Production ledger, finished-goods / packing / raw-material stock by date, "
    "sales orders and FIFO dispatch guidance. Balances are replayed from the ledger on every view."
)

settings = get_settings()
conn = get_conn(settings.db_path)
ensure_schema(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    st.write(f"**Cloud sync:** {'configured' if settings.sync_url else 'not configured'}")

counts = q(
    conn,
    """
    SELECT
      (SELECT COUNT(*) FROM production_records) AS records,
      (SELECT COUNT(*) FROM sales_orders) AS orders,
      (SELECT COUNT(*) FROM sales_orders WHERE status IN ('Pending','Processing')) AS pending,
      (SELECT COUNT(*) FROM stock_transactions) AS transactions
    """,
)[0]

c1, c2, c3, c4 = st.columns(4)
c1.metric("Ledger entries", counts["records"])
c2.metric("Sales orders", counts["orders"])
c3.metric("Pending orders", counts["pending"])
c4.metric("Stock transactions", counts["transactions"])

st.info(
    "Use the left sidebar navigation. Start with **🧪 Data Management** to load demo data, then try "
    "**Production Entry**, **Finished Goods** and **Dispatch Assistant**.",
    icon="ℹ️",
)
