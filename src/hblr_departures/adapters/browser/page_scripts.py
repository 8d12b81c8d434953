"""Scripts evaluated inside the source page.

Each script is a single arrow function taking one argument object, as
``page.evaluate(script, arg)`` expects.
"""

# Activates the light rail tab by id, falling back to a text match among tab
# controls. Returns the strategy that found the tab, or null.
SELECT_TAB_SCRIPT = """
({tabId, tabLabel, tabIdMarker}) => {
  let tab = document.getElementById(tabId);
  let strategy = 'id';
  if (!tab) {
    strategy = 'text';
    const candidates = Array.from(
      document.querySelectorAll('[role="tab"], .nav-link, button[id*="tab"]')
    );
    tab = candidates.find(candidate => {
      const text = (candidate.textContent || '').trim().toLowerCase();
      return text === tabLabel && (candidate.id || '').includes(tabIdMarker);
    }) || null;
  }
  if (!tab) {
    return null;
  }
  tab.focus();
  tab.click();
  for (const name of ['click', 'mousedown', 'mouseup']) {
    tab.dispatchEvent(new Event(name, { bubbles: true }));
  }
  return strategy;
}
"""

TAB_STATE_SCRIPT = """
({tabId, railTabId}) => {
  const railTab = document.getElementById(railTabId);
  const lightRailTab = document.getElementById(tabId);
  return {
    railTabActive: railTab ? railTab.classList.contains('active') : false,
    lightRailTabActive: lightRailTab ? lightRailTab.classList.contains('active') : false,
    activeTabs: Array.from(document.querySelectorAll('.nav-link.active')).map(tab => ({
      id: tab.id,
      text: (tab.textContent || '').trim(),
    })),
  };
}
"""

# Marks the light rail tab active without going through the site's handlers.
FORCE_ACTIVATE_TAB_SCRIPT = """
({tabId, railTabId}) => {
  const lightRailTab = document.getElementById(tabId);
  if (!lightRailTab) {
    return false;
  }
  const railTab = document.getElementById(railTabId);
  if (railTab) {
    railTab.classList.remove('active');
    railTab.setAttribute('aria-selected', 'false');
  }
  lightRailTab.classList.add('active');
  lightRailTab.setAttribute('aria-selected', 'true');
  lightRailTab.dispatchEvent(new Event('shown.bs.tab', { bubbles: true }));
  return true;
}
"""

# Sets a form field and fires the events reactive validation listens to.
# A disabled field is only touched when forceEnable is set.
FILL_FIELD_SCRIPT = """
({fieldId, value, forceEnable}) => {
  const field = document.getElementById(fieldId);
  if (!field) {
    return false;
  }
  if (field.disabled) {
    if (!forceEnable) {
      return false;
    }
    field.disabled = false;
  }
  field.focus();
  field.value = value;
  for (const name of ['input', 'change', 'blur']) {
    field.dispatchEvent(new Event(name, { bubbles: true }));
  }
  return true;
}
"""

# Clicks the submit button. Returns 'strict' when an enabled button with the
# exact label was found, 'fallback' for the looser match, null otherwise.
CLICK_SUBMIT_SCRIPT = """
({label, fallbackLabel}) => {
  const buttons = Array.from(
    document.querySelectorAll('button, [role="button"], .btn, input[type="submit"]')
  );
  const textOf = button => (button.textContent || button.value || '').toLowerCase();

  const strict = buttons.find(button =>
    textOf(button).includes(label)
      && !button.disabled
      && !button.classList.contains('disabled')
  );
  if (strict) {
    strict.focus();
    strict.click();
    strict.dispatchEvent(new Event('click', { bubbles: true }));
    strict.dispatchEvent(new MouseEvent('click', { bubbles: true, cancelable: true }));
    return 'strict';
  }

  const loose = buttons.find(button =>
    (textOf(button).includes(label) || textOf(button).includes(fallbackLabel))
      && !button.disabled
  );
  if (loose) {
    loose.focus();
    loose.click();
    return 'fallback';
  }
  return null;
}
"""

DIAGNOSTICS_SCRIPT = """
({tabId, railTabId, lineFieldId, originFieldId, label}) => {
  const railTab = document.getElementById(railTabId);
  const lightRailTab = document.getElementById(tabId);
  const lineField = document.getElementById(lineFieldId);
  const originField = document.getElementById(originFieldId);
  const submit = Array.from(
    document.querySelectorAll('button, [role="button"], .btn, input[type="submit"]')
  ).find(button => (button.textContent || button.value || '').toLowerCase().includes(label));
  return {
    url: window.location.href,
    railTabActive: railTab ? railTab.classList.contains('active') : false,
    lightRailTabActive: lightRailTab ? lightRailTab.classList.contains('active') : false,
    lineValue: lineField ? lineField.value : null,
    originValue: originField ? originField.value : null,
    originDisabled: originField ? originField.disabled : null,
    submitFound: !!submit,
    submitEnabled: submit ? !submit.disabled && !submit.classList.contains('disabled') : false,
  };
}
"""
