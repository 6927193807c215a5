# Bumped whenever ensure_schema gains a migration.
SCHEMA_VERSION = 3

SCHEMA_SQL = r"""
-- Production ledger (production, return and manual dispatch lines)
CREATE TABLE IF NOT EXISTS production_records (
  id TEXT PRIMARY KEY,
  date TEXT NOT NULL,                    -- ISO date
  product_name TEXT NOT NULL,
  batch_no TEXT NOT NULL,
  size TEXT NOT NULL,
  weight_kg REAL NOT NULL DEFAULT 0,
  rejected_kg REAL NOT NULL DEFAULT 0,
  duples_pkt INTEGER NOT NULL DEFAULT 0,
  carton_ctn INTEGER NOT NULL DEFAULT 0,
  notes TEXT,
  timestamp INTEGER NOT NULL,            -- creation order (ms)
  is_return INTEGER NOT NULL DEFAULT 0,
  is_dispatch INTEGER NOT NULL DEFAULT 0
);

-- Customers
CREATE TABLE IF NOT EXISTS customers (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  mobile TEXT,
  email TEXT,
  city TEXT,
  map_link TEXT,
  order_history TEXT NOT NULL DEFAULT '[]'   -- JSON list of order ids
);

-- Sales orders (header)
CREATE TABLE IF NOT EXISTS sales_orders (
  id TEXT PRIMARY KEY,
  order_date TEXT NOT NULL,
  sales_person TEXT,
  customer_name TEXT,
  mobile_number TEXT,
  email TEXT,
  city TEXT,
  map_link TEXT,
  po_number TEXT,
  po_file_name TEXT,
  po_file_data TEXT,
  total_weight_kg REAL NOT NULL DEFAULT 0,
  sub_total REAL NOT NULL DEFAULT 0,
  vat_amount REAL NOT NULL DEFAULT 0,
  grand_total REAL NOT NULL DEFAULT 0,
  status TEXT NOT NULL DEFAULT 'Pending',    -- Pending / Processing / Dispatched / Delivered
  created_seq INTEGER NOT NULL DEFAULT 0
);

-- Sales order lines
CREATE TABLE IF NOT EXISTS sales_order_items (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  order_id TEXT NOT NULL,
  line_no INTEGER NOT NULL,
  product_id TEXT,
  product_name TEXT NOT NULL,
  size TEXT NOT NULL,
  quantity_ctn REAL NOT NULL DEFAULT 0,
  calculated_weight_kg REAL NOT NULL DEFAULT 0,
  price_per_kg REAL NOT NULL DEFAULT 0,
  item_value REAL NOT NULL DEFAULT 0,
  assigned_batch TEXT,
  FOREIGN KEY (order_id) REFERENCES sales_orders(id) ON DELETE CASCADE
);

-- Manual stock transactions (packing + raw materials)
CREATE TABLE IF NOT EXISTS stock_transactions (
  id TEXT PRIMARY KEY,
  item_id TEXT NOT NULL,
  date TEXT NOT NULL,
  qty REAL NOT NULL,
  type TEXT NOT NULL,                    -- INWARD / ISSUE / ADJUSTMENT
  notes TEXT,
  created_seq INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_records_date ON production_records(date);
CREATE INDEX IF NOT EXISTS idx_items_order ON sales_order_items(order_id);
CREATE INDEX IF NOT EXISTS idx_txn_item ON stock_transactions(item_id);
"""
