from tortoise import BaseDBAsyncClient


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "categories" (
    "created_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "name" VARCHAR(100) NOT NULL,
    "description" TEXT,
    "parent_id" INT REFERENCES "categories" ("id") ON DELETE RESTRICT
);
CREATE TABLE IF NOT EXISTS "materials" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "name" VARCHAR(100) NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS "units" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "name" VARCHAR(50) NOT NULL UNIQUE,
    "abbreviation" VARCHAR(10),
    "kind" VARCHAR(20) NOT NULL DEFAULT 'unidad' /* LENGTH: longitud\nWEIGHT: peso\nVOLUME: volumen\nUNIT: unidad\nTIME: tiempo\nOTHER: otro */
);
CREATE TABLE IF NOT EXISTS "elements" (
    "created_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "name" VARCHAR(255) NOT NULL,
    "description" TEXT,
    "quantity" INT NOT NULL DEFAULT 0,
    "requires_serials" INT NOT NULL DEFAULT 0,
    "status" VARCHAR(20) NOT NULL DEFAULT 'bueno' /* NEW: nuevo\nGOOD: bueno\nMAINTENANCE: mantenimiento\nLOANED: prestado\nDAMAGED: dañado\nDEPLETED: agotado */,
    "location" VARCHAR(255),
    "category_id" INT REFERENCES "categories" ("id") ON DELETE RESTRICT,
    "material_id" INT REFERENCES "materials" ("id") ON DELETE SET NULL,
    "unit_id" INT REFERENCES "units" ("id") ON DELETE SET NULL
);
CREATE TABLE IF NOT EXISTS "serials" (
    "created_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "serial_number" VARCHAR(100) NOT NULL UNIQUE,
    "status" VARCHAR(20) NOT NULL DEFAULT 'nuevo' /* NEW: nuevo\nGOOD: bueno\nMAINTENANCE: mantenimiento\nLOANED: prestado\nDAMAGED: dañado\nDEPLETED: agotado */,
    "intake_date" DATE NOT NULL,
    "location" VARCHAR(255),
    "element_id" INT NOT NULL REFERENCES "elements" ("id") ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS "lots" (
    "created_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "lot_number" VARCHAR(27) NOT NULL UNIQUE,
    "available" INT NOT NULL DEFAULT 0,
    "rented" INT NOT NULL DEFAULT 0,
    "cleaning" INT NOT NULL DEFAULT 0,
    "maintenance" INT NOT NULL DEFAULT 0,
    "retired" INT NOT NULL DEFAULT 0,
    "cleaning_status" VARCHAR(20) NOT NULL DEFAULT 'GOOD' /* CLEAN: CLEAN\nGOOD: GOOD\nDIRTY: DIRTY\nVERY_DIRTY: VERY_DIRTY\nDAMAGED: DAMAGED */,
    "location" VARCHAR(255),
    "element_id" INT NOT NULL REFERENCES "elements" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_lots_lot_num_5b1c2e" ON "lots" ("lot_number");
CREATE TABLE IF NOT EXISTS "lot_movements" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "public_id" VARCHAR(27) NOT NULL UNIQUE,
    "quantity" INT NOT NULL,
    "from_status" VARCHAR(20) NOT NULL /* AVAILABLE: AVAILABLE\nRENTED: RENTED\nCLEANING: CLEANING\nMAINTENANCE: MAINTENANCE\nRETIRED: RETIRED */,
    "to_status" VARCHAR(20) NOT NULL /* AVAILABLE: AVAILABLE\nRENTED: RENTED\nCLEANING: CLEANING\nMAINTENANCE: MAINTENANCE\nRETIRED: RETIRED */,
    "cleaning_status_from" VARCHAR(20) /* CLEAN: CLEAN\nGOOD: GOOD\nDIRTY: DIRTY\nVERY_DIRTY: VERY_DIRTY\nDAMAGED: DAMAGED */,
    "cleaning_status_to" VARCHAR(20) NOT NULL /* CLEAN: CLEAN\nGOOD: GOOD\nDIRTY: DIRTY\nVERY_DIRTY: VERY_DIRTY\nDAMAGED: DAMAGED */,
    "reason" VARCHAR(30) NOT NULL /* MANUAL_ADJUSTMENT: MANUAL_ADJUSTMENT\nCLEANING_COMPLETED: CLEANING_COMPLETED\nREPAIR_COMPLETED: REPAIR_COMPLETED\nDAMAGED_IN_USE: DAMAGED_IN_USE\nDISCARDED: DISCARDED\nLOST: LOST\nRENTED_OUT: RENTED_OUT\nRETURNED_CLEAN: RETURNED_CLEAN\nRETURNED_DIRTY: RETURNED_DIRTY\nRETURNED_DAMAGED: RETURNED_DAMAGED */,
    "description" TEXT,
    "repair_cost" REAL,
    "moved_at" TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "element_id" INT NOT NULL REFERENCES "elements" ("id") ON DELETE CASCADE,
    "lot_id" INT NOT NULL REFERENCES "lots" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_lot_movemen_public__8d3f41" ON "lot_movements" ("public_id");
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSON NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "lot_movements";
        DROP TABLE IF EXISTS "lots";
        DROP TABLE IF EXISTS "serials";
        DROP TABLE IF EXISTS "elements";
        DROP TABLE IF EXISTS "units";
        DROP TABLE IF EXISTS "materials";
        DROP TABLE IF EXISTS "categories";"""
