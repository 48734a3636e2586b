"""Pytest configuration and shared fixtures."""

import pytest

from lens_reviewer.models.sources import SourceFile

# Sample sources for testing
UNITY_PLAYER = """\
using UnityEngine;

public class PlayerController : MonoBehaviour
{
    [SerializeField] private float speed = 5f;
    public int score;

    void Update()
    {
        var body = GetComponent<Rigidbody>();
        body.velocity = Vector3.forward * speed;
        var enemies = FindObjectsOfType<Enemy>();
    }
}
"""

UNITY_CLEAN = """\
using UnityEngine;

public class Spinner : MonoBehaviour
{
    [SerializeField] private float degreesPerSecond = 90f;

    private Transform cachedTransform;

    void Awake()
    {
        cachedTransform = transform;
    }

    void Update()
    {
        cachedTransform.Rotate(0f, degreesPerSecond * Time.deltaTime, 0f);
    }
}
"""

PYTHON_SERVICE = """\
import time

import requests


async def fetch_status(url):
    time.sleep(1)
    response = requests.get(url)
    return response.json()


def parse(payload: dict) -> dict:
    try:
        return payload["data"]
    except:
        return {}
"""

TYPESCRIPT_GALLERY = """\
import React, { useEffect, useState } from "react";

export function Gallery(props: any) {
  const [items, setItems] = useState([]);

  useEffect(() => {
    fetch("/api/items").then((r) => r.json()).then(setItems);
  });

  return (
    <div onClick={() => props.onSelect()}>
      {items.map((item, index) => (
        <img src={item.url} key={index} />
      ))}
    </div>
  );
}
"""


@pytest.fixture
def unity_player() -> SourceFile:
    """A MonoBehaviour doing lookups every frame."""
    return SourceFile(path="Assets/Scripts/PlayerController.cs", content=UNITY_PLAYER)


@pytest.fixture
def unity_clean() -> SourceFile:
    """A MonoBehaviour with nothing to report."""
    return SourceFile(path="Assets/Scripts/Spinner.cs", content=UNITY_CLEAN)


@pytest.fixture
def python_service() -> SourceFile:
    """An async module with blocking calls and a bare except."""
    return SourceFile(path="app/service.py", content=PYTHON_SERVICE)


@pytest.fixture
def typescript_gallery() -> SourceFile:
    """A React component breaking hook and accessibility rules."""
    return SourceFile(path="src/Gallery.tsx", content=TYPESCRIPT_GALLERY)


@pytest.fixture
def python_definition():
    """The built-in Python reviewer definition."""
    from lens_reviewer.agents.definitions import get_definition

    return get_definition("python-reviewer")


@pytest.fixture
def unity_definition():
    """The built-in Unity reviewer definition."""
    from lens_reviewer.agents.definitions import get_definition

    return get_definition("unity-reviewer")
