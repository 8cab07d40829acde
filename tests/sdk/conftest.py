"""Shared C++ sources for static hint extraction tests."""

import pytest

DOOR_SOURCE = """\
class CFuncDoor : public CBaseToggle
{
public:
    bool KeyValue( const char *szKeyName, const char *szValue );
};

bool CFuncDoor::KeyValue( const char *szKeyName, const char *szValue )
{
    if ( FStrEq( szKeyName, "speed" ) )
    {
        m_flSpeed = atof( szValue );
    }
    else if ( FStrEq( szKeyName, "rendercolor" ) )
    {
        UTIL_StringToColor32( &m_clrRender, szValue );
    }
    else if ( FStrEq( szKeyName, "locked" ) )
    {
        int val = atoi( szValue );
        if (val)
            m_bLocked = true;
    }
    else if ( FStrEq( szKeyName, "other" ) )
    {
        DoSomething( szValue );
    }
    else if ( Q_stricmp( szKeyName, "ignored" ) == 0 )
    {
        m_iIgnored = atoi( szValue );
    }
    else
    {
        return BaseClass::KeyValue( szKeyName, szValue );
    }
    return true;
}

LINK_ENTITY_TO_CLASS( func_door, CFuncDoor );
LINK_ENTITY_TO_CLASS( func_door_rotating, CFuncDoor );
"""

LIGHT_SOURCE = """\
class CLight : public CPointEntity
{
};

BEGIN_DATADESC( CLight )
    DEFINE_FIELD( m_bOn, FIELD_BOOLEAN ),
    DEFINE_KEYFIELD( m_iStyle, FIELD_INTEGER, "style" ),
    DEFINE_KEYFIELD( m_flBrightness, FIELD_FLOAT, "brightness" ),
    DEFINE_KEYFIELD( m_iszPattern, FIELD_STRING, "pattern" ),
    DEFINE_KEYFIELD( m_hTarget, FIELD_EHANDLE, "target" ),
END_DATADESC()

LINK_ENTITY_TO_CLASS( light, CLight );
"""


@pytest.fixture
def door_source() -> str:
    return DOOR_SOURCE


@pytest.fixture
def light_source() -> str:
    return LIGHT_SOURCE


@pytest.fixture
def sdk_tree(tmp_path):
    """A small engine source tree on disk."""
    root = tmp_path / "sdk"
    (root / "server").mkdir(parents=True)
    (root / "server" / "doors.cpp").write_text(DOOR_SOURCE, encoding="utf-8")
    (root / "server" / "light.cpp").write_text(LIGHT_SOURCE, encoding="utf-8")
    (root / "server" / "notes.txt").write_text("FStrEq", encoding="utf-8")
    return root
